import logging
import math
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from tradepnl.core.entities.charges import ChargeRates, DEFAULT_CHARGES, Instrument
from tradepnl.core.errors import InvalidRateError
from tradepnl.core.interfaces.settings_store import ISettingsStore

logger = logging.getLogger(__name__)

SETTINGS_KEY_PREFIX = "trade_charges"


def settings_key(instrument: Instrument) -> str:
    return f"{SETTINGS_KEY_PREFIX}:{instrument.value}"


def validate_rates(rates: ChargeRates) -> None:
    for name, value in rates.model_dump().items():
        if not math.isfinite(value) or value < 0:
            raise InvalidRateError(f"{name} must be a non-negative number, got {value}")


class ChargeSchedule:
    """
    Per-instrument fee table: built-in defaults overlaid with the user's
    overrides. Overrides are loaded from the settings store once, at
    construction, and written back on every edit or reset.
    """

    def __init__(self, store: Optional[ISettingsStore] = None):
        self.store = store
        self._rates: Dict[Instrument, ChargeRates] = {
            instrument: rates.model_copy() for instrument, rates in DEFAULT_CHARGES.items()
        }
        if store is not None:
            self._load_overrides()

    def _load_overrides(self):
        for instrument in Instrument:
            raw = self.store.get(settings_key(instrument))
            if raw is None:
                continue
            try:
                rates = ChargeRates.model_validate(raw)
                validate_rates(rates)
            except (PydanticValidationError, InvalidRateError) as e:
                logger.warning(f"Ignoring stored charges for {instrument.value}: {e}")
                continue
            self._rates[instrument] = rates
            logger.info(f"Loaded charge overrides for {instrument.value}")

    def get_rates(self, instrument: Instrument) -> ChargeRates:
        return self._rates[instrument].model_copy()

    def all_rates(self) -> Dict[Instrument, ChargeRates]:
        return {instrument: self.get_rates(instrument) for instrument in Instrument}

    def set_rates(self, instrument: Instrument, rates: ChargeRates) -> None:
        validate_rates(rates)
        self._rates[instrument] = rates.model_copy()
        if self.store is not None:
            self.store.set(settings_key(instrument), rates.model_dump())
        logger.info(f"Charge rates updated for {instrument.value}")

    def reset_to_default(self, instrument: Instrument) -> None:
        self._rates[instrument] = DEFAULT_CHARGES[instrument].model_copy()
        if self.store is not None:
            self.store.delete(settings_key(instrument))
        logger.info(f"Charge rates reset to default for {instrument.value}")

    def reset_all(self) -> None:
        for instrument in Instrument:
            self.reset_to_default(instrument)
