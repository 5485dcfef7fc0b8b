import redis
import json
import logging
from typing import Optional, Any
import os

from tradepnl.core.interfaces.settings_store import ISettingsStore

logger = logging.getLogger(__name__)


class RedisSettingsStore(ISettingsStore):
    """
    Charge-rate overrides kept in Redis as JSON strings, without expiry.
    Connection or I/O failures are logged and treated as "no override",
    so the calculator keeps working on default rates.
    """

    def __init__(self, redis_url: Optional[str] = None, client: Optional[Any] = None):
        self.redis_url = redis_url or os.getenv("REDIS_URL")
        self.client = client
        if self.client is None and self.redis_url:
            try:
                self.client = redis.from_url(self.redis_url, decode_responses=True)
                # Test connection
                self.client.ping()
                logger.info("Connected to Redis for settings.")
            except (redis.RedisError, ValueError) as e:
                logger.warning(f"Failed to connect to Redis: {e}. Settings will not persist.")
                self.client = None
        elif self.client is None:
            logger.info("REDIS_URL not set. Settings will not persist.")

    @property
    def connected(self) -> bool:
        return self.client is not None

    def get(self, key: str) -> Optional[Any]:
        if not self.client:
            return None
        try:
            data = self.client.get(key)
            if data:
                return json.loads(data)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.warning(f"Redis get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        if not self.client:
            return
        try:
            self.client.set(key, json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Redis set error for {key}: {e}")

    def delete(self, key: str) -> None:
        if not self.client:
            return
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Redis delete error for {key}: {e}")
