import logging
from typing import List

from tradepnl.core.entities.charges import EXCHANGES
from tradepnl.core.entities.dashboard import DashboardResponse, DateRange
from tradepnl.core.entities.trade import (
    SaveTradeRequest,
    StoreTradePayload,
    TradeEconomics,
    TradeInput,
    TradeRecord,
    TradeStatus,
)
from tradepnl.core.errors import ValidationError
from tradepnl.core.interfaces.trade_store import ITradeStore
from tradepnl.core.use_cases.aggregation import filter_by_range, sort_newest_first, summarize
from tradepnl.core.use_cases.charge_schedule import ChargeSchedule
from tradepnl.core.use_cases.trade_economics import compute_trade_economics

logger = logging.getLogger(__name__)

RECENT_TRADES_LIMIT = 20

ADJUSTMENT_INSTRUMENT = "CHARGES"
ADJUSTMENT_EXCHANGE = "ADJ"


def _money(value: float) -> float:
    return round(value, 2)


# --- Business Logic Services ---

class TradeService:
    def __init__(self, store: ITradeStore, schedule: ChargeSchedule):
        self.store = store
        self.schedule = schedule

    def calculate(self, trade: TradeInput) -> TradeEconomics:
        return compute_trade_economics(trade, self.schedule.get_rates(trade.instrument))

    async def save_trade(self, request: SaveTradeRequest) -> TradeEconomics:
        if request.entry_price <= 0:
            raise ValidationError("Entry price required")

        economics = self.calculate(request)
        payload = self.build_trade_payload(request, economics)
        await self.store.save_trade(payload)
        logger.info(
            f"Saved {payload.buySell} {payload.instrument} x{payload.quantity:g} "
            f"net={payload.netPnl} status={payload.status}"
        )
        return economics

    @staticmethod
    def build_trade_payload(request: SaveTradeRequest, economics: TradeEconomics) -> StoreTradePayload:
        stop = request.stop_loss_price or ""
        return StoreTradePayload(
            instrument=request.instrument.value,
            exchange=EXCHANGES[request.instrument],
            buySell=request.side.value.upper(),
            optionType=request.option_type,
            strikePrice=request.strike_price,
            entryPrice=request.entry_price,
            exitPrice=request.exit_price or "",
            lots=request.lots,
            lotSize=request.lot_size,
            quantity=economics.quantity,
            capitalBefore=request.capital_before,
            capitalUsed=_money(economics.capital_required),
            slType="Price",
            slValue=stop,
            slTrigger=stop,
            maxLoss=_money(economics.risk_amount),
            # the store's brokerage column holds total charges
            brokerage=_money(economics.total_charges),
            grossPnl=_money(economics.gross_pnl),
            netPnl=_money(economics.net_pnl),
            roi=f"{economics.roi_pct:.2f}%",
            status=economics.status.value,
            closeReason="Manual",
        )

    async def save_manual_charge(self, amount: float, description: str = "") -> StoreTradePayload:
        """
        Record a charge not tied to a trade (e.g. DP or platform fees) as a
        compensating row that only moves net P&L.
        """
        if not amount or amount <= 0:
            raise ValidationError("Please enter a valid amount.")

        payload = StoreTradePayload(
            instrument=ADJUSTMENT_INSTRUMENT,
            exchange=ADJUSTMENT_EXCHANGE,
            buySell="-",
            optionType="DEBIT",
            exitPrice=0.0,
            brokerage=_money(amount),
            netPnl=-_money(amount),
            status=TradeStatus.CLOSED.value,
            closeReason=description,
        )
        await self.store.save_trade(payload)
        logger.info(f"Saved manual charge of {payload.brokerage}")
        return payload


class DashboardService:
    def __init__(self, store: ITradeStore):
        self.store = store

    async def list_trades(self, date_range: DateRange = DateRange.ALL) -> List[TradeRecord]:
        records = sort_newest_first(await self.store.get_trades())
        return filter_by_range(records, date_range)

    async def get_dashboard(self, date_range: DateRange = DateRange.ALL) -> DashboardResponse:
        records = await self.list_trades(date_range)
        return DashboardResponse(
            range=date_range,
            summary=summarize(records),
            trades=records[:RECENT_TRADES_LIMIT],
        )
