"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_eastern,
    today_eastern,
    parse_date,
    timestamp_string,
    EASTERN_TZ,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
    ParseError,
    PositionsSourceError,
    QuoteError,
    NetworkError,
    BadRequestError,
    TickerNotFoundError,
    NoResultError,
    AggregationError,
)

__all__ = [
    "now_eastern",
    "today_eastern",
    "parse_date",
    "timestamp_string",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "ParseError",
    "PositionsSourceError",
    "QuoteError",
    "NetworkError",
    "BadRequestError",
    "TickerNotFoundError",
    "NoResultError",
    "AggregationError",
]
