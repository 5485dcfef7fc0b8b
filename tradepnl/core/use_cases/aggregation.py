from datetime import datetime, timedelta
from typing import List, Optional

from tradepnl.core.entities.dashboard import CumulativePoint, DashboardSummary, DateRange
from tradepnl.core.entities.trade import TradeRecord

WEEK_DAYS = 7


def filter_by_range(
    records: List[TradeRecord],
    date_range: DateRange,
    now: Optional[datetime] = None,
) -> List[TradeRecord]:
    """
    Keep the records whose trade date falls in the range. Records are
    never modified; a record without a readable date only survives ALL.
    """
    if date_range == DateRange.ALL:
        return list(records)

    today = (now or datetime.now()).date()
    week_cutoff = today - timedelta(days=WEEK_DAYS)

    def in_range(record: TradeRecord) -> bool:
        traded = record.trade_date
        if traded is None:
            return False
        day = traded.date()
        if date_range == DateRange.TODAY:
            return day == today
        if date_range == DateRange.WEEK:
            return day > week_cutoff
        return day.month == today.month and day.year == today.year

    return [r for r in records if in_range(r)]


def sort_newest_first(records: List[TradeRecord]) -> List[TradeRecord]:
    return sorted(records, key=_timestamp_key, reverse=True)


def build_cumulative_series(records: List[TradeRecord]) -> List[CumulativePoint]:
    """
    Running net P&L in trade order (oldest first), whatever order the
    records arrive in.
    """
    series: List[CumulativePoint] = []
    cumulative = 0.0
    for record in sorted(records, key=_timestamp_key):
        cumulative += record.net_pnl
        series.append(CumulativePoint(label=record.label, cumulative_net_pnl=cumulative))
    return series


def summarize(records: List[TradeRecord]) -> DashboardSummary:
    """
    Fold records into dashboard statistics.

    `records` should be newest-first: current capital is taken from the
    first record that carries a positive capital_before.
    """
    summary = DashboardSummary(trade_count=len(records))

    for record in records:
        net = record.net_pnl
        summary.total_net_pnl += net
        summary.total_gross_pnl += record.gross_pnl
        summary.total_charges += record.brokerage

        if net > 0:
            summary.win_count += 1
            summary.max_profit = max(summary.max_profit, net)
        elif net < 0:
            summary.loss_count += 1
            summary.max_loss = min(summary.max_loss, net)

        if summary.current_capital == 0 and record.capital_before > 0:
            summary.current_capital = record.capital_before

    if summary.trade_count:
        summary.win_rate_pct = round(summary.win_count / summary.trade_count * 100, 1)

    summary.cumulative_series = build_cumulative_series(records)
    return summary


def _timestamp_key(record: TradeRecord) -> datetime:
    return record.timestamp or datetime.min
