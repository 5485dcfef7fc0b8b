import os

from tradepnl.core.errors import ConfigurationError

PLACEHOLDER_MARKER = "REPLACE"
DEFAULT_TIMEOUT_SECONDS = 30.0


def get_store_url() -> str:
    """
    Base URL of the trade store web app. Missing or placeholder values
    are a configuration error, not something to retry.
    """
    url = (os.getenv("TRADE_STORE_URL") or "").strip()
    if not url or PLACEHOLDER_MARKER in url:
        raise ConfigurationError("Trade store URL not set. Configure TRADE_STORE_URL.")
    return url


def get_store_timeout() -> float:
    raw = os.getenv("TRADE_STORE_TIMEOUT")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
