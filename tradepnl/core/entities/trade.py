from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from tradepnl.core.entities.charges import Instrument, LOT_SIZES
from tradepnl.core.parsing import parse_datetime, parse_int, parse_non_negative, parse_number


class Side(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class TradeStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class TradeInput(BaseModel):
    """
    One trade as entered on the calculator form.

    Numeric fields go through a parsing step: blank, non-numeric or
    negative values become 0. A missing lot size falls back to the
    instrument's standard lot.
    """
    instrument: Instrument = Instrument.NIFTY
    side: Side = Side.BUY
    lots: float = 0.0
    lot_size: int = 0
    entry_price: float = 0.0
    exit_price: float = 0.0  # 0 = position still open
    stop_loss_price: float = 0.0
    include_charges: bool = False

    @model_validator(mode="before")
    @classmethod
    def _default_lot_size(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("lot_size") in (None, ""):
            data = dict(data)
            instrument = data.get("instrument", Instrument.NIFTY)
            try:
                data["lot_size"] = LOT_SIZES[Instrument(instrument)]
            except (ValueError, KeyError):
                data.pop("lot_size", None)
        return data

    @field_validator("instrument", mode="before")
    @classmethod
    def _upper_instrument(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("side", mode="before")
    @classmethod
    def _title_side(cls, v: Any) -> Any:
        # "BUY" / "buy" -> "Buy"
        return v.strip().capitalize() if isinstance(v, str) else v

    @field_validator("lots", "entry_price", "exit_price", "stop_loss_price", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        return parse_non_negative(v)

    @field_validator("lot_size", mode="before")
    @classmethod
    def _coerce_lot_size(cls, v: Any) -> int:
        return parse_int(v)

    @property
    def is_buy(self) -> bool:
        return self.side == Side.BUY


class TradeEconomics(BaseModel):
    """
    Everything derived from a TradeInput and a fee table.
    """
    model_config = ConfigDict(frozen=True)

    quantity: float
    gross_pnl: float
    points: float
    risk_amount: float
    capital_required: float
    brokerage_fee: float = 0.0
    stt: float = 0.0
    txn_charge: float = 0.0
    gst: float = 0.0
    stamp_duty: float = 0.0
    sebi_fees: float = 0.0
    total_charges: float = 0.0
    net_pnl: float
    break_even_price: float
    roi_pct: float
    status: TradeStatus


class SaveTradeRequest(TradeInput):
    """Calculator form plus the journal-only fields sent on save."""
    option_type: str = "CE"
    strike_price: str = ""
    capital_before: float = 0.0

    @field_validator("option_type", mode="before")
    @classmethod
    def _upper_option_type(cls, v: Any) -> str:
        return str(v or "CE").strip().upper()

    @field_validator("strike_price", mode="before")
    @classmethod
    def _strike_as_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("capital_before", mode="before")
    @classmethod
    def _coerce_capital(cls, v: Any) -> float:
        return parse_non_negative(v)


class ManualChargeRequest(BaseModel):
    amount: float
    description: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        return parse_number(v)


class StoreTradePayload(BaseModel):
    """
    Body of the store's saveTrade action. Field names are the store's
    column keys.
    """
    action: str = "saveTrade"
    instrument: str
    exchange: str
    buySell: str
    optionType: str
    strikePrice: str = ""
    entryPrice: float = 0.0
    exitPrice: Union[float, str] = ""  # "" while the trade is open
    lots: float = 0.0
    lotSize: int = 0
    quantity: float = 0.0
    capitalBefore: float = 0.0
    capitalUsed: float = 0.0
    slType: str = ""
    slValue: Union[float, str] = ""
    slTrigger: Union[float, str] = ""
    maxLoss: float = 0.0
    brokerage: float = 0.0
    grossPnl: float = 0.0
    netPnl: float = 0.0
    roi: str = "0%"
    status: str = TradeStatus.OPEN.value
    closeReason: str = "Manual"


# store column (lower-cased) -> TradeRecord field
_RECORD_KEYS: Dict[str, str] = {
    "id": "id",
    "date": "date",
    "time": "time",
    "createdat": "created_at",
    "timestamp": "created_at",
    "instrument": "instrument",
    "exchange": "exchange",
    "buysell": "buy_sell",
    "optiontype": "option_type",
    "strikeprice": "strike_price",
    "entryprice": "entry_price",
    "exitprice": "exit_price",
    "lots": "lots",
    "lotsize": "lot_size",
    "quantity": "quantity",
    "qty": "quantity",
    "capitalbefore": "capital_before",
    "capitalused": "capital_used",
    "sltype": "sl_type",
    "slvalue": "sl_value",
    "sltrigger": "sl_trigger",
    "maxloss": "max_loss",
    "brokerage": "brokerage",
    "grosspnl": "gross_pnl",
    "netpnl": "net_pnl",
    "roi": "roi",
    "status": "status",
    "closereason": "close_reason",
}

_NUMERIC_FIELDS = (
    "entry_price", "exit_price", "lots", "lot_size", "quantity",
    "capital_before", "capital_used", "sl_value", "sl_trigger",
    "max_loss", "brokerage", "gross_pnl", "net_pnl",
)


class TradeRecord(BaseModel):
    """
    A saved trade (or manual charge adjustment) as returned by the store.
    `brokerage` holds the trade's total charges.
    """
    id: Optional[str] = None
    date: str = ""
    time: str = ""
    created_at: str = ""
    instrument: str = ""
    exchange: str = ""
    buy_sell: str = ""
    option_type: str = ""
    strike_price: str = ""
    entry_price: float = 0.0
    exit_price: float = 0.0
    lots: float = 0.0
    lot_size: float = 0.0
    quantity: float = 0.0
    capital_before: float = 0.0
    capital_used: float = 0.0
    sl_type: str = ""
    sl_value: float = 0.0
    sl_trigger: float = 0.0
    max_loss: float = 0.0
    brokerage: float = 0.0
    gross_pnl: float = 0.0
    net_pnl: float = 0.0
    roi: str = ""
    status: str = ""
    close_reason: str = ""

    @field_validator(*_NUMERIC_FIELDS, mode="before")
    @classmethod
    def _coerce_numeric(cls, v: Any) -> float:
        return parse_number(v)

    @field_validator(
        "date", "time", "created_at", "instrument", "exchange", "buy_sell",
        "option_type", "strike_price", "sl_type", "roi", "status", "close_reason",
        mode="before",
    )
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Optional[str]:
        return None if v in (None, "") else str(v)

    @classmethod
    def from_store_row(cls, row: Dict[str, Any]) -> "TradeRecord":
        """Build a record from a store row whose keys may vary in case."""
        values: Dict[str, Any] = {}
        for key, value in row.items():
            field = _RECORD_KEYS.get(str(key).strip().lower())
            if field and field not in values:
                values[field] = value
        return cls(**values)

    @property
    def trade_date(self) -> Optional[datetime]:
        """Calendar datetime of the trade (the `date` column)."""
        return parse_datetime(self.date)

    @property
    def timestamp(self) -> Optional[datetime]:
        """Ordering key: the created-at timestamp, else the trade date."""
        return parse_datetime(self.created_at) or parse_datetime(self.date)

    @property
    def label(self) -> str:
        return f"{self.date} {self.time}".strip()
