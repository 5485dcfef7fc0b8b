"""
Charge Entities for TradeDesk

Per-instrument statutory fee rates for a discount-broker options account.
"""
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class Instrument(str, Enum):
    NIFTY = "NIFTY"
    CRUDE = "CRUDE"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip().upper():
                    return member
        return None


LOT_SIZES: Dict[Instrument, int] = {
    Instrument.NIFTY: 65,
    Instrument.CRUDE: 100,
}

EXCHANGES: Dict[Instrument, str] = {
    Instrument.NIFTY: "NSE",
    Instrument.CRUDE: "MCX",
}


class ChargeRates(BaseModel):
    """
    Fee table for one instrument. Percent fields are in percent units
    (0.125 means 0.125 %), brokerage is a flat amount per order.
    """
    brokerage_per_order: float
    stt_pct: float  # sell leg only
    txn_charge_pct: float  # on turnover
    gst_pct: float  # on brokerage + txn charge
    sebi_fees_pct: float  # on turnover
    stamp_duty_pct: float  # buy leg only

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "brokerage_per_order": 20.0,
                "stt_pct": 0.125,
                "txn_charge_pct": 0.05,
                "gst_pct": 18.0,
                "sebi_fees_pct": 0.0001,
                "stamp_duty_pct": 0.003,
            }
        }
    )


class ChargeRatesUpdate(BaseModel):
    """
    Partial edit of a fee table. Omitted fields keep their current value.
    """
    brokerage_per_order: Optional[float] = None
    stt_pct: Optional[float] = None
    txn_charge_pct: Optional[float] = None
    gst_pct: Optional[float] = None
    sebi_fees_pct: Optional[float] = None
    stamp_duty_pct: Optional[float] = None

    def merge_into(self, current: ChargeRates) -> ChargeRates:
        changes = self.model_dump(exclude_none=True)
        return current.model_copy(update=changes)


DEFAULT_CHARGES: Dict[Instrument, ChargeRates] = {
    Instrument.NIFTY: ChargeRates(
        brokerage_per_order=20.0,
        stt_pct=0.125,
        txn_charge_pct=0.05,
        gst_pct=18.0,
        sebi_fees_pct=0.0001,  # Rs 10 per crore
        stamp_duty_pct=0.003,
    ),
    Instrument.CRUDE: ChargeRates(
        brokerage_per_order=20.0,
        stt_pct=0.05,  # commodity options
        txn_charge_pct=0.05,
        gst_pct=18.0,
        sebi_fees_pct=0.0001,
        stamp_duty_pct=0.003,
    ),
}


class InstrumentInfo(BaseModel):
    instrument: Instrument
    exchange: str
    lot_size: int
