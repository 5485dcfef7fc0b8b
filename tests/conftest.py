"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient, ASGITransport

from tradepnl.api.main import app, get_charge_schedule, get_trade_store
from tradepnl.core.use_cases.charge_schedule import ChargeSchedule
from tradepnl.infrastructure.cache.memory_settings import InMemorySettingsStore
from tradepnl.infrastructure.gateways.local_mock import LocalMockTradeStore


def make_row(day, net, gross=None, brokerage=0.0, capital_before=0.0, time="10:00:00", **extra):
    """A store row in the sheet's own column casing."""
    row = {
        "Date": day.strftime("%Y-%m-%d"),
        "Time": time,
        "Instrument": "NIFTY",
        "BuySell": "BUY",
        "NetPnl": net,
        "GrossPnl": net if gross is None else gross,
        "Brokerage": brokerage,
        "CapitalBefore": capital_before,
    }
    row.update(extra)
    return row


@pytest.fixture
def settings_store():
    return InMemorySettingsStore()


@pytest.fixture
def schedule(settings_store):
    return ChargeSchedule(settings_store)


@pytest.fixture
def trade_store():
    today = datetime.now()
    return LocalMockTradeStore(rows=[
        make_row(today, 1200.0, gross=1265.6, brokerage=65.6, capital_before=50000, time="11:15:00"),
        make_row(today - timedelta(days=1), -400.0, gross=-340.0, brokerage=60.0, capital_before=50400),
        make_row(today - timedelta(days=40), 250.0, brokerage=0.0),
    ])


@pytest.fixture
async def client(schedule, trade_store):
    """Async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_charge_schedule] = lambda: schedule
    app.dependency_overrides[get_trade_store] = lambda: trade_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
