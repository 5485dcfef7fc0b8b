"""
Coercion of loosely-typed form fields and store cells.

A blank or non-numeric field contributes nothing, so it parses to zero
instead of raising.
"""
import math
from datetime import date, datetime
from typing import Any, Optional

_STRIP_CHARS = ("₹", ",", "%")

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M:%S",
)


def parse_number(value: Any) -> float:
    """Parse a number, mapping missing / blank / non-numeric / non-finite to 0.0.

    Currency symbols, thousands separators and a trailing percent sign are
    ignored, so "₹1,234.50" and "12.5%" both parse.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        for ch in _STRIP_CHARS:
            text = text.replace(ch, "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_non_negative(value: Any) -> float:
    return max(parse_number(value), 0.0)


def parse_int(value: Any) -> int:
    # parseInt semantics: "65.9" -> 65
    return int(parse_non_negative(value))


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a store date/timestamp cell into a naive local datetime.

    Timezone-aware values (e.g. "2024-03-01T18:30:00.000Z") are converted
    to local time first so the calendar day matches what the user saw.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            if parsed is None:
                return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
