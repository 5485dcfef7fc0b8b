"""
Dashboard Entities for TradeDesk

Summary statistics over saved trades. Recomputed on every filter change,
never persisted.
"""
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from tradepnl.core.entities.trade import TradeRecord


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class CumulativePoint(BaseModel):
    label: str
    cumulative_net_pnl: float


class DashboardSummary(BaseModel):
    total_net_pnl: float = 0.0
    total_gross_pnl: float = 0.0
    total_charges: float = 0.0
    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    win_rate_pct: float = 0.0
    max_profit: float = 0.0
    max_loss: float = 0.0
    current_capital: float = 0.0
    cumulative_series: List[CumulativePoint] = Field(default_factory=list)


class DashboardResponse(BaseModel):
    range: DateRange
    summary: DashboardSummary
    trades: List[TradeRecord]  # most recent first
