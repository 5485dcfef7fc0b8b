from abc import ABC, abstractmethod
from typing import List

from tradepnl.core.entities.trade import StoreTradePayload, TradeRecord


class ITradeStore(ABC):
    @abstractmethod
    async def get_trades(self) -> List[TradeRecord]:
        """
        Returns every saved record with keys normalised and header
        echoes removed. Order is whatever the store returns.
        """
        pass

    @abstractmethod
    async def save_trade(self, payload: StoreTradePayload) -> None:
        """
        Appends one record. Raises RemoteError when the store does not
        acknowledge it.
        """
        pass
