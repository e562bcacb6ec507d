"""Market data service: quote provider calls routed through the fallback caches."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, Optional

from portfolio_tracker.core.exceptions import NetworkError, NoResultError
from portfolio_tracker.core.timezone import today_eastern
from portfolio_tracker.domain.models import QuoteResponse
from portfolio_tracker.providers.quote_provider import QuoteProvider
from portfolio_tracker.services.quote_cache import QuoteCaches

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Service for fetching market data (latest, previous close, historic, names).

    Wraps the provider with last-known-good caches: a failed call returns
    the cached answer for the same key when there is one.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        caches: Optional[QuoteCaches] = None,
        history_buffer_days: int = 3,
        previous_close_window_days: int = 7,
        today: Callable[[], date] = today_eastern,
    ):
        self._provider = provider
        self._caches = caches or QuoteCaches()
        self._buffer = timedelta(days=history_buffer_days)
        self._previous_close_window = timedelta(days=previous_close_window_days)
        self._today = today

    @property
    def caches(self) -> QuoteCaches:
        return self._caches

    def today(self) -> date:
        return self._today()

    async def latest_quote(self, ticker: str) -> QuoteResponse:
        """Latest quote response for a ticker."""
        return await self._caches.latest_quote.get_or_fetch(
            ticker, lambda: self._provider.latest_price(ticker)
        )

    async def previous_close(self, ticker: str) -> float:
        """
        Previous close from a trailing window of daily quotes.

        With two or more quotes it is the second-to-last close; a single
        quote serves as both latest and previous close.
        """

        async def fetch() -> float:
            today = self._today()
            response = await self._provider.price_history(
                ticker, today - self._previous_close_window, today
            )
            quotes = response.quote_list()
            if len(quotes) >= 2:
                return quotes[-2].close
            if len(quotes) == 1:
                return quotes[0].close
            raise NoResultError(ticker, "previous close")

        return await self._caches.previous_close.get_or_fetch(ticker, fetch)

    async def historic_quote(
        self,
        ticker: str,
        day: date,
        timeout: Optional[float] = None,
    ) -> QuoteResponse:
        """
        Quotes from `day` to `day` + buffer, to tolerate market closures.

        With a timeout, a call that does not answer in time fails with
        NetworkError (and falls back to the cache like any other failure).
        """

        async def fetch() -> QuoteResponse:
            call = self._provider.price_history(ticker, day, day + self._buffer)
            if timeout is None:
                return await call
            try:
                return await asyncio.wait_for(call, timeout)
            except asyncio.TimeoutError:
                raise NetworkError(ticker, f"timed out after {timeout}s")

        return await self._caches.historic_quote.get_or_fetch((ticker, day), fetch)

    async def close_at(self, ticker: str, day: date, timeout: Optional[float] = None) -> float:
        """Most recent close of the window starting at `day`."""
        response = await self.historic_quote(ticker, day, timeout=timeout)
        close = response.latest_close()
        if close is None:
            raise NoResultError(ticker, f"close on {day}")
        return close

    async def display_name(self, ticker: str) -> str:
        """Short name of the first search result for a ticker."""
        return await self._caches.display_name.get_or_fetch(
            ticker, lambda: self._provider.search_name(ticker)
        )
