"""
Tests for form/store value coercion.
"""
from datetime import datetime

import pytest

from tradepnl.core.parsing import parse_datetime, parse_int, parse_non_negative, parse_number


@pytest.mark.parametrize("raw,expected", [
    (None, 0.0),
    ("", 0.0),
    ("   ", 0.0),
    ("abc", 0.0),
    ("nan", 0.0),
    ("inf", 0.0),
    (True, 0.0),
    ("12.5", 12.5),
    ("-40", -40.0),
    ("₹1,234.50", 1234.5),
    ("18.99%", 18.99),
    (7, 7.0),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_parse_non_negative_and_int():
    assert parse_non_negative("-3") == 0
    assert parse_int("65.9") == 65
    assert parse_int("") == 0


@pytest.mark.parametrize("raw,expected", [
    ("2024-03-15", datetime(2024, 3, 15)),
    ("2024-03-15 09:15:00", datetime(2024, 3, 15, 9, 15)),
    ("15/03/2024", datetime(2024, 3, 15)),
    ("", None),
    ("Date", None),
    (None, None),
])
def test_parse_datetime(raw, expected):
    assert parse_datetime(raw) == expected


def test_parse_datetime_converts_utc_to_local():
    parsed = parse_datetime("2024-03-15T08:00:00.000Z")
    expected = datetime.fromisoformat("2024-03-15T08:00:00+00:00").astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None
