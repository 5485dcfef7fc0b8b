import copy
from typing import Any, Dict, Optional

from tradepnl.core.interfaces.settings_store import ISettingsStore


class InMemorySettingsStore(ISettingsStore):
    """Process-local settings, used when Redis is not configured."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Optional[Any]:
        value = self.data.get(key)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
