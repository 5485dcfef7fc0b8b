"""
Error taxonomy for TradeDesk.

The economics engine never raises; these are for the save/load flows
and for charge-rate edits.
"""
from typing import Optional


class TradeDeskError(Exception):
    """Base class for errors surfaced to the user."""


class ConfigurationError(TradeDeskError):
    """The trade store endpoint is missing or still a placeholder."""


class ValidationError(TradeDeskError):
    """User input rejected before any state change (e.g. entry price <= 0)."""


class InvalidRateError(TradeDeskError):
    """A charge rate is negative or not a finite number."""


class RemoteError(TradeDeskError):
    """The trade store answered with a non-success status or could not be reached."""

    def __init__(self, message: str, server_message: Optional[str] = None):
        super().__init__(message)
        self.server_message = server_message
