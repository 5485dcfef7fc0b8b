"""
Tests for the HTTP trade store gateway, using httpx.MockTransport in place
of the sheet web app.
"""
import json

import httpx
import pytest

from tradepnl.core.entities.trade import StoreTradePayload
from tradepnl.core.errors import ConfigurationError, RemoteError
from tradepnl.infrastructure.gateways.remote_store import RemoteTradeStore

STORE_URL = "https://script.example.com/macros/s/abc/exec"


def store_with(handler):
    return RemoteTradeStore(base_url=STORE_URL, transport=httpx.MockTransport(handler))


def payload():
    return StoreTradePayload(instrument="NIFTY", exchange="NSE", buySell="BUY", optionType="CE", entryPrice=100)


@pytest.mark.asyncio
async def test_get_trades_normalises_keys_and_drops_header_rows():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"status": "success", "data": [
            {"Date": "Date", "NetPnl": "NetPnl"},
            {"DATE": "2024-03-15", "TIME": "10:00", "NETPNL": "1,234.40", "Brokerage": "65.6",
             "capitalBefore": "50000", "ROI": "18.99%", "Qty": 65},
            {"date": "", "netpnl": 5},
            {"date": "2024-03-14", "netpnl": "oops"},
        ]})

    records = await store_with(handler).get_trades()

    assert seen["params"] == {"action": "getTrades"}
    assert len(records) == 2
    first = records[0]
    assert first.date == "2024-03-15"
    assert first.net_pnl == pytest.approx(1234.40)
    assert first.brokerage == pytest.approx(65.6)
    assert first.capital_before == 50000
    assert first.quantity == 65
    assert first.roi == "18.99%"
    assert records[1].net_pnl == 0


@pytest.mark.asyncio
async def test_save_trade_posts_plain_text_json():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success"})

    await store_with(handler).save_trade(payload())

    assert seen["method"] == "POST"
    assert seen["content_type"].startswith("text/plain")
    assert seen["body"]["action"] == "saveTrade"
    assert seen["body"]["buySell"] == "BUY"
    assert seen["body"]["entryPrice"] == 100


@pytest.mark.asyncio
async def test_follows_web_app_redirect():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "script.example.com":
            return httpx.Response(302, headers={"Location": "https://content.example.com/echo"})
        return httpx.Response(200, json={"status": "success", "data": []})

    assert await store_with(handler).get_trades() == []


@pytest.mark.asyncio
async def test_error_status_carries_server_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "error", "message": "Sheet not found"})

    with pytest.raises(RemoteError) as exc_info:
        await store_with(handler).save_trade(payload())

    assert exc_info.value.server_message == "Sheet not found"
    assert "Sheet not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_failure_is_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteError):
        await store_with(handler).get_trades()


@pytest.mark.asyncio
async def test_http_error_status_is_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with pytest.raises(RemoteError):
        await store_with(handler).get_trades()


@pytest.mark.asyncio
async def test_non_json_body_is_remote_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>login</html>")

    with pytest.raises(RemoteError):
        await store_with(handler).get_trades()


@pytest.mark.parametrize("url", [None, "", "https://script.google.com/REPLACE_ME/exec"])
def test_missing_or_placeholder_url_is_configuration_error(monkeypatch, url):
    if url is None:
        monkeypatch.delenv("TRADE_STORE_URL", raising=False)
    else:
        monkeypatch.setenv("TRADE_STORE_URL", url)

    with pytest.raises(ConfigurationError):
        RemoteTradeStore()


def test_url_and_timeout_from_environment(monkeypatch):
    monkeypatch.setenv("TRADE_STORE_URL", STORE_URL)
    monkeypatch.setenv("TRADE_STORE_TIMEOUT", "7.5")

    store = RemoteTradeStore()
    assert store.base_url == STORE_URL
    assert store.timeout == 7.5
