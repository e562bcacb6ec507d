"""Application-level exceptions."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when user input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ParseError(AppError):
    """Raised when a date or number in declared data cannot be parsed."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Cannot parse {field}: {value!r}", code="PARSE_ERROR")


class PositionsSourceError(AppError):
    """Raised when the positions file cannot be read at all."""

    def __init__(self, message: str):
        super().__init__(message, code="POSITIONS_SOURCE_ERROR")


class QuoteError(AppError):
    """Base exception for quote provider failures."""

    def __init__(self, message: str, ticker: Optional[str] = None, code: str = "QUOTE_ERROR"):
        self.ticker = ticker
        super().__init__(message, code=code)


class NetworkError(QuoteError):
    """Raised when the quote provider is unreachable or the transport fails."""

    def __init__(self, ticker: Optional[str], reason: str):
        super().__init__(f"Network error for {ticker}: {reason}", ticker=ticker, code="NETWORK_ERROR")


class BadRequestError(QuoteError):
    """Raised when the provider rejects a request (invalid range, provider quirk)."""

    def __init__(self, ticker: Optional[str], reason: str, code: str = "BAD_REQUEST"):
        super().__init__(f"Bad request for {ticker}: {reason}", ticker=ticker, code=code)


class TickerNotFoundError(BadRequestError):
    """Raised when the provider has no data for a ticker."""

    def __init__(self, ticker: Optional[str], reason: str = "no data"):
        super().__init__(ticker, reason, code="NOT_FOUND")


class NoResultError(QuoteError):
    """Raised when a lookup returns an empty result set."""

    def __init__(self, ticker: Optional[str], what: str = "result"):
        super().__init__(f"No {what} for {ticker}", ticker=ticker, code="NO_RESULT")


class AggregationError(AppError):
    """Raised when a historic aggregate has no successful contribution."""

    def __init__(self, warnings: list[str]):
        self.warnings = warnings
        super().__init__("\n".join(warnings), code="AGGREGATION_ERROR")
