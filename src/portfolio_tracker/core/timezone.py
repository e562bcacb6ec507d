"""Timezone and date utilities for US/Eastern market time."""

from datetime import date, datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

from portfolio_tracker.core.exceptions import ParseError

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def today_eastern() -> date:
    """Return the current market calendar date."""
    return now_eastern().date()


def parse_date(value: Optional[str], field: str = "date") -> date:
    """
    Parse a user-supplied date string.

    Raises ParseError for empty or unparseable values.
    """
    if value is None or not str(value).strip():
        raise ParseError(field, value)
    try:
        return date_parser.parse(str(value)).date()
    except (ValueError, OverflowError) as exc:
        raise ParseError(field, value) from exc


def timestamp_string(dt: Optional[datetime] = None) -> str:
    """Return an ISO-like timestamp used as the balance log key."""
    dt = dt or now_eastern()
    return dt.strftime("%Y-%m-%d %H:%M:%S%z")
