import logging
from functools import lru_cache
from typing import Dict, List

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Imports ---
from tradepnl.config import get_log_level
from tradepnl.core.entities.charges import (
    ChargeRates,
    ChargeRatesUpdate,
    EXCHANGES,
    Instrument,
    InstrumentInfo,
    LOT_SIZES,
)
from tradepnl.core.entities.dashboard import DashboardResponse, DateRange
from tradepnl.core.entities.trade import (
    ManualChargeRequest,
    SaveTradeRequest,
    TradeEconomics,
    TradeInput,
    TradeRecord,
)
from tradepnl.core.errors import ConfigurationError, InvalidRateError, RemoteError, ValidationError
from tradepnl.core.interfaces.settings_store import ISettingsStore
from tradepnl.core.interfaces.trade_store import ITradeStore
from tradepnl.core.services import DashboardService, TradeService
from tradepnl.core.use_cases.charge_schedule import ChargeSchedule
from tradepnl.core.use_cases.trade_economics import compute_trade_economics
from tradepnl.infrastructure.cache.memory_settings import InMemorySettingsStore
from tradepnl.infrastructure.cache.redis_settings import RedisSettingsStore
from tradepnl.infrastructure.gateways.remote_store import RemoteTradeStore

# Setup Logging
logging.basicConfig(level=get_log_level())
logger = logging.getLogger("TradeDesk")

app = FastAPI(title="TradeDesk API", version="1.0.0", description="Options trade P&L calculator & dashboard")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Mapping ---

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(InvalidRateError)
async def invalid_rate_handler(request: Request, exc: InvalidRateError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})

# --- Dependency Injection ---

@lru_cache
def get_settings_store() -> ISettingsStore:
    store = RedisSettingsStore()
    return store if store.connected else InMemorySettingsStore()


@lru_cache
def get_charge_schedule() -> ChargeSchedule:
    return ChargeSchedule(get_settings_store())


def get_trade_store() -> ITradeStore:
    return RemoteTradeStore()


def get_trade_service(
    store: ITradeStore = Depends(get_trade_store),
    schedule: ChargeSchedule = Depends(get_charge_schedule),
) -> TradeService:
    return TradeService(store, schedule)


def get_dashboard_service(store: ITradeStore = Depends(get_trade_store)) -> DashboardService:
    return DashboardService(store)

# --- Endpoints ---

@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/v1/instruments", response_model=List[InstrumentInfo])
async def list_instruments():
    return [
        InstrumentInfo(instrument=i, exchange=EXCHANGES[i], lot_size=LOT_SIZES[i])
        for i in Instrument
    ]


@app.post("/v1/calculate", response_model=TradeEconomics)
async def calculate(
    trade: TradeInput,
    schedule: ChargeSchedule = Depends(get_charge_schedule),
):
    """
    Calculator: recompute on every form change. Blank or invalid numbers
    count as zero, so a half-filled form never errors.
    """
    return compute_trade_economics(trade, schedule.get_rates(trade.instrument))


@app.get("/v1/charges", response_model=Dict[Instrument, ChargeRates])
async def get_all_charges(schedule: ChargeSchedule = Depends(get_charge_schedule)):
    return schedule.all_rates()


@app.delete("/v1/charges", response_model=Dict[Instrument, ChargeRates])
async def reset_all_charges(schedule: ChargeSchedule = Depends(get_charge_schedule)):
    schedule.reset_all()
    return schedule.all_rates()


@app.get("/v1/charges/{instrument}", response_model=ChargeRates)
async def get_charges(instrument: Instrument, schedule: ChargeSchedule = Depends(get_charge_schedule)):
    return schedule.get_rates(instrument)


@app.put("/v1/charges/{instrument}", response_model=ChargeRates)
async def update_charges(
    instrument: Instrument,
    update: ChargeRatesUpdate,
    schedule: ChargeSchedule = Depends(get_charge_schedule),
):
    """
    Edit an instrument's fee table. Fields left out keep their current value.
    """
    schedule.set_rates(instrument, update.merge_into(schedule.get_rates(instrument)))
    return schedule.get_rates(instrument)


@app.delete("/v1/charges/{instrument}", response_model=ChargeRates)
async def reset_charges(instrument: Instrument, schedule: ChargeSchedule = Depends(get_charge_schedule)):
    schedule.reset_to_default(instrument)
    return schedule.get_rates(instrument)


@app.post("/v1/trades")
async def save_trade(request: SaveTradeRequest, service: TradeService = Depends(get_trade_service)):
    economics = await service.save_trade(request)
    return {"status": "success", "message": "Trade saved successfully!", "economics": economics}


@app.get("/v1/trades", response_model=List[TradeRecord])
async def list_trades(
    range: DateRange = Query(DateRange.ALL, description="'all', 'today', 'week' or 'month'"),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.list_trades(range)


@app.post("/v1/adjustments")
async def add_manual_charge(request: ManualChargeRequest, service: TradeService = Depends(get_trade_service)):
    """
    Manual charge (DP fee, platform fee...) booked as a negative-P&L row.
    """
    payload = await service.save_manual_charge(request.amount, request.description)
    return {"status": "success", "message": "Charge added successfully!", "amount": payload.brokerage}


@app.get("/v1/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    range: DateRange = Query(DateRange.ALL, description="'all', 'today', 'week' or 'month'"),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.get_dashboard(range)
