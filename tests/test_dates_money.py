import datetime as _dt
from decimal import Decimal

import pytest

from xero_gateway.dates import format_date, parse_date_time
from xero_gateway.money import format_decimal, parse_decimal, to_decimal


@pytest.mark.parametrize(
    "s,expected",
    [
        ("2008-09-16T00:00:00", _dt.datetime(2008, 9, 16)),
        ("2008-09-16T10:30:15", _dt.datetime(2008, 9, 16, 10, 30, 15)),
        ("2025-08-27T12:00:00Z", _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc)),
        (
            "2025-08-27T07:00:00-05:00",
            _dt.datetime(2025, 8, 27, 12, 0, 0, tzinfo=_dt.timezone.utc),
        ),
        ("2024-03-15", _dt.datetime(2024, 3, 15)),
    ],
)
def test_parse_date_time(s, expected):
    assert parse_date_time(s) == expected


def test_parse_date_time_keeps_naive_values_naive():
    assert parse_date_time("2008-09-16T00:00:00").tzinfo is None


def test_parse_date_time_passthrough():
    dt = _dt.datetime(2025, 1, 1, 0, 0)
    assert parse_date_time(dt) is dt


def test_parse_date_time_rejects_garbage():
    with pytest.raises(ValueError):
        parse_date_time("next tuesday")


def test_parse_date_time_rejects_non_strings():
    with pytest.raises(TypeError):
        parse_date_time(20240101)


def test_format_date():
    assert format_date(_dt.date(2024, 1, 5)) == "2024-01-05"
    assert format_date(_dt.datetime(2024, 1, 5, 23, 59)) == "2024-01-05"


def test_format_date_rejects_strings():
    with pytest.raises(TypeError):
        format_date("2024-01-05")


@pytest.mark.parametrize("text", ["12.50", " 12.50 ", "0.1", "100000000000000000000.0001"])
def test_parse_decimal_is_exact(text):
    assert parse_decimal(text) == Decimal(text.strip())


@pytest.mark.parametrize("text", ["", "abc", "NaN", "Infinity"])
def test_parse_decimal_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_decimal(text)


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("12.50"), "12.50"),
        (Decimal("1E+3"), "1000"),
        (100.0, "100.0"),
        (0.1, "0.1"),
        (7, "7"),
        ("3.25", "3.25"),
    ],
)
def test_format_decimal(value, expected):
    assert format_decimal(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("1.50"), Decimal("1.50")),
        (0.1, Decimal("0.1")),
        (3, Decimal("3")),
        (" 2.25 ", Decimal("2.25")),
    ],
)
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


@pytest.mark.parametrize("value", [True, object()])
def test_to_decimal_rejects_non_numbers(value):
    with pytest.raises(TypeError):
        to_decimal(value)
