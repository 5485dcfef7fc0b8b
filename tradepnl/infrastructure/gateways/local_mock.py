import uuid
from datetime import datetime
from typing import Callable, List, Optional

from tradepnl.core.entities.trade import StoreTradePayload, TradeRecord
from tradepnl.core.interfaces.trade_store import ITradeStore


class LocalMockTradeStore(ITradeStore):
    """
    In-process trade store. Assigns id, date, time and createdAt the way
    the sheet web app does on append.
    """

    def __init__(self, rows: Optional[List[dict]] = None, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.records: List[TradeRecord] = [TradeRecord.from_store_row(r) for r in rows or []]
        self.payloads: List[StoreTradePayload] = []

    async def get_trades(self) -> List[TradeRecord]:
        return list(self.records)

    async def save_trade(self, payload: StoreTradePayload) -> None:
        now = self.clock()
        row = payload.model_dump(exclude={"action"})
        row.update(
            id=uuid.uuid4().hex,
            date=now.strftime("%Y-%m-%d"),
            time=now.strftime("%H:%M:%S"),
            createdAt=now.isoformat(),
        )
        self.payloads.append(payload)
        self.records.append(TradeRecord.from_store_row(row))
