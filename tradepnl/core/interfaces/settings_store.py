from abc import ABC, abstractmethod
from typing import Any, Optional


class ISettingsStore(ABC):
    """Key-value store for user settings (JSON-serialisable values)."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass
