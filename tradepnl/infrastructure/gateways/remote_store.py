import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from tradepnl.config import get_store_timeout, get_store_url
from tradepnl.core.entities.trade import StoreTradePayload, TradeRecord
from tradepnl.core.errors import RemoteError
from tradepnl.core.interfaces.trade_store import ITradeStore

logger = logging.getLogger(__name__)

HEADER_DATE_LABEL = "date"


class RemoteTradeStore(ITradeStore):
    """
    ITradeStore backed by a spreadsheet web app (Apps Script style):
    GET ?action=getTrades to list, POST {"action": "saveTrade", ...} to append.
    Both answer {"status": "success" | "error", "data"?, "message"?}.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        :param base_url: Web app URL. Defaults to TRADE_STORE_URL; a missing or
            placeholder URL raises ConfigurationError before any request.
        :param transport: Optional httpx transport (tests inject a MockTransport).
        """
        self.base_url = base_url if base_url is not None else get_store_url()
        self.timeout = timeout if timeout is not None else get_store_timeout()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        # Apps Script answers with a redirect to the real content URL
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    async def get_trades(self) -> List[TradeRecord]:
        body = await self._request("GET", params={"action": "getTrades"})
        rows = body.get("data") or []
        if not isinstance(rows, list):
            raise RemoteError("Error fetching trades: malformed response")
        return self._map_rows_to_records(rows)

    async def save_trade(self, payload: StoreTradePayload) -> None:
        # text/plain avoids a CORS preflight on the web app side
        await self._request(
            "POST",
            content=payload.model_dump_json(),
            headers={"Content-Type": "text/plain;charset=utf-8"},
        )

    async def _request(self, method: str, **kwargs) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, self.base_url, **kwargs)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Trade store {method} failed: {e}")
            raise RemoteError(f"Trade store unreachable: {e}") from e
        except json.JSONDecodeError as e:
            logger.error(f"Trade store returned a non-JSON body: {e}")
            raise RemoteError("Trade store returned an invalid response") from e

        if not isinstance(body, dict) or body.get("status") != "success":
            message = body.get("message") if isinstance(body, dict) else None
            logger.error(f"Trade store {method} rejected: {message}")
            raise RemoteError(f"Error: {message or 'Unknown error'}", server_message=message)
        return body

    def _map_rows_to_records(self, rows: List[Dict[str, Any]]) -> List[TradeRecord]:
        """
        Maps raw sheet rows to TradeRecords. Column names vary in case
        between sheets; empty rows and echoed header rows are dropped.
        """
        records = []
        for row in rows:
            if not isinstance(row, dict):
                logger.warning(f"Skipping non-object row: {row!r}")
                continue
            normalized = {str(k).strip().lower(): v for k, v in row.items()}
            date_cell = str(normalized.get("date") or "").strip()
            if not date_cell or date_cell.lower() == HEADER_DATE_LABEL:
                continue
            try:
                records.append(TradeRecord.from_store_row(normalized))
            except PydanticValidationError as map_err:
                logger.warning(f"Skipping malformed trade row: {map_err}")
                continue
        logger.info(f"Loaded {len(records)} trade records from store")
        return records
