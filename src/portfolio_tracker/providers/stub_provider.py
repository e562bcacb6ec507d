"""Stub quote provider for offline/testing use."""

from datetime import date, datetime, time, timedelta

from portfolio_tracker.core.exceptions import BadRequestError, TickerNotFoundError
from portfolio_tracker.core.timezone import EASTERN_TZ, today_eastern
from portfolio_tracker.domain.models import Quote, QuoteResponse


# Deterministic fake prices for common symbols: (last price, short name)
_STUB_PRICES: dict[str, tuple[float, str]] = {
    "AAPL": (185.50, "Apple Inc."),
    "GOOGL": (142.75, "Alphabet Inc."),
    "MSFT": (378.25, "Microsoft Corporation"),
    "AMZN": (178.50, "Amazon.com, Inc."),
    "TSLA": (248.75, "Tesla, Inc."),
    "NVDA": (485.25, "NVIDIA Corporation"),
    "META": (505.50, "Meta Platforms, Inc."),
    "SPY": (485.25, "SPDR S&P 500"),
    "QQQ": (418.75, "Invesco QQQ Trust"),
    "VTI": (252.30, "Vanguard Total Stock Market ETF"),
}

# Synthetic drift: each calendar day back in time lowers the close by this fraction
_DAILY_DRIFT = 0.0005


class StubQuoteProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Known symbols get a fixed latest price and a synthetic weekday history
    that drifts down into the past; unknown symbols raise TickerNotFoundError.
    """

    def __init__(self, today: date | None = None):
        self._today = today

    def _reference_day(self) -> date:
        return self._today or today_eastern()

    def _close_on(self, ticker: str, day: date) -> float:
        last_price, _ = self._lookup(ticker)
        days_back = max((self._reference_day() - day).days, 0)
        return round(last_price / (1 + _DAILY_DRIFT * days_back), 2)

    @staticmethod
    def _lookup(ticker: str) -> tuple[float, str]:
        entry = _STUB_PRICES.get(ticker.upper())
        if entry is None:
            raise TickerNotFoundError(ticker)
        return entry

    @staticmethod
    def _at_close(day: date) -> datetime:
        return EASTERN_TZ.localize(datetime.combine(day, time(16, 0)))

    async def latest_price(self, ticker: str) -> QuoteResponse:
        today = self._reference_day()
        return await self.price_history(ticker, today - timedelta(days=30), today)

    async def price_history(self, ticker: str, start: date, end: date) -> QuoteResponse:
        self._lookup(ticker)
        if start > end:
            raise BadRequestError(ticker, f"start {start} is after end {end}")
        end = min(end, self._reference_day())
        quotes = []
        day = start
        while day <= end:
            if day.weekday() < 5:  # Mon-Fri
                quotes.append(Quote(close=self._close_on(ticker, day), timestamp=self._at_close(day)))
            day += timedelta(days=1)
        return QuoteResponse(quotes=quotes, last=quotes[-1] if quotes else None)

    async def search_name(self, ticker: str) -> str:
        _, name = self._lookup(ticker)
        return name
