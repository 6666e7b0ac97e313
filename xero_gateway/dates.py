"""Date helpers following the Xero wire convention.

Currently provides:
    format_date(d): render a date (or datetime) as ``YYYY-MM-DD``.
    parse_date_time(s): parse the timestamps Xero returns, e.g.
        • "2008-09-16T00:00:00"          (local time, returned naive)
        • "2008-09-16T10:30:00Z"         (UTC, returned aware)
        • "2008-09-16T10:30:00.123+13:00"

Keeping both here gives the record types a single spot to patch if the API
changes its date format.
"""
from __future__ import annotations

import datetime as _dt
from typing import Union

from dateutil.parser import isoparse as _isoparse

__all__ = ["format_date", "parse_date_time"]

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: Union[_dt.date, _dt.datetime]) -> str:
    """Return *value* as ``YYYY-MM-DD``; any time part is dropped."""
    if not isinstance(value, _dt.date):
        raise TypeError("format_date expects date or datetime, got " + type(value).__name__)
    return value.strftime(DATE_FORMAT)


def parse_date_time(value: Union[str, _dt.datetime]) -> _dt.datetime:
    """Parse *value* into a datetime.

    Accepts ISO-8601 strings or datetime objects (returned unchanged). Naive
    timestamps stay naive: Xero reports them in the organisation's local time.
    """
    if isinstance(value, _dt.datetime):
        return value

    if not isinstance(value, str):
        raise TypeError("parse_date_time expects str or datetime, got " + type(value).__name__)

    try:
        return _isoparse(value.strip())
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"invalid Xero date-time: {value!r}") from exc
