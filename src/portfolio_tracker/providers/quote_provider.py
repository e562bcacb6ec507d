"""Quote provider protocol."""

from datetime import date
from typing import Protocol

from portfolio_tracker.domain.models import QuoteResponse


class QuoteProvider(Protocol):
    """
    Protocol for remote quote providers.

    Every operation fails independently with a QuoteError subclass
    (NetworkError, BadRequestError, TickerNotFoundError, NoResultError);
    library-specific exceptions never leave the implementation.
    """

    async def latest_price(self, ticker: str) -> QuoteResponse:
        """Latest quote for a ticker, with the recent daily quotes as the list."""
        ...

    async def price_history(self, ticker: str, start: date, end: date) -> QuoteResponse:
        """Daily quotes from start to end, both inclusive."""
        ...

    async def search_name(self, ticker: str) -> str:
        """Short display name of the first search result for a ticker."""
        ...
