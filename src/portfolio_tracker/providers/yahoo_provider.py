"""Yahoo Finance quote provider built on yfinance."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

import pandas as pd
import yfinance as yf
from yfinance.exceptions import (
    YFException,
    YFInvalidPeriodError,
    YFRateLimitError,
    YFTickerMissingError,
)

from portfolio_tracker.core.exceptions import (
    BadRequestError,
    NetworkError,
    NoResultError,
    QuoteError,
    TickerNotFoundError,
)
from portfolio_tracker.domain.models import Quote, QuoteResponse

logger = logging.getLogger(__name__)

# Daily bars requested for a latest-price lookup; the last bar is the latest quote.
LATEST_PERIOD = "1mo"


def translate_error(ticker: str, exc: Exception) -> QuoteError:
    """Map a yfinance or transport exception onto the QuoteError taxonomy."""
    if isinstance(exc, QuoteError):
        return exc
    if isinstance(exc, YFRateLimitError):
        return NetworkError(ticker, "rate limited")
    if isinstance(exc, YFTickerMissingError):
        return TickerNotFoundError(ticker, str(exc))
    if isinstance(exc, YFInvalidPeriodError):
        return BadRequestError(ticker, str(exc))
    if isinstance(exc, YFException):
        return BadRequestError(ticker, str(exc))
    return NetworkError(ticker, f"{type(exc).__name__}: {exc}")


def frame_to_response(ticker: str, frame: Optional[pd.DataFrame]) -> QuoteResponse:
    """
    Convert a yfinance history frame into a QuoteResponse.

    Rows without a close are dropped from the list; if the final row has no
    close, `last` stays None.
    """
    if frame is None or frame.empty or "Close" not in frame.columns:
        raise TickerNotFoundError(ticker, "empty price history")

    closes = frame["Close"]
    quotes = [
        Quote(close=float(close), timestamp=pd.Timestamp(ts).to_pydatetime())
        for ts, close in closes.items()
        if pd.notna(close)
    ]
    last: Optional[Quote] = None
    last_close = closes.iloc[-1]
    if pd.notna(last_close):
        last = Quote(close=float(last_close), timestamp=pd.Timestamp(closes.index[-1]).to_pydatetime())
    return QuoteResponse(quotes=quotes, last=last)


class YahooQuoteProvider:
    """
    Quote provider backed by Yahoo Finance.

    yfinance is blocking; every call is offloaded with asyncio.to_thread so
    concurrent resolutions do not block the event loop.
    """

    async def latest_price(self, ticker: str) -> QuoteResponse:
        return await self._call(ticker, self._latest_price_sync, ticker)

    async def price_history(self, ticker: str, start: date, end: date) -> QuoteResponse:
        if start > end:
            raise BadRequestError(ticker, f"start {start} is after end {end}")
        return await self._call(ticker, self._price_history_sync, ticker, start, end)

    async def search_name(self, ticker: str) -> str:
        return await self._call(ticker, self._search_name_sync, ticker)

    async def _call(self, ticker: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except QuoteError:
            raise
        except Exception as exc:
            error = translate_error(ticker, exc)
            logger.debug("Yahoo call failed for %s: %s", ticker, error.message)
            raise error from exc

    @staticmethod
    def _latest_price_sync(ticker: str) -> QuoteResponse:
        frame = yf.Ticker(ticker).history(
            period=LATEST_PERIOD,
            interval="1d",
            auto_adjust=False,
            raise_errors=True,
        )
        return frame_to_response(ticker, frame)

    @staticmethod
    def _price_history_sync(ticker: str, start: date, end: date) -> QuoteResponse:
        # yfinance treats `end` as exclusive
        frame = yf.Ticker(ticker).history(
            start=start.isoformat(),
            end=(end + timedelta(days=1)).isoformat(),
            interval="1d",
            auto_adjust=False,
            raise_errors=True,
        )
        return frame_to_response(ticker, frame)

    @staticmethod
    def _search_name_sync(ticker: str) -> str:
        results = yf.Search(ticker, max_results=1, news_count=0).quotes
        if not results:
            raise NoResultError(ticker, "search result")
        first = results[0]
        name = first.get("shortname") or first.get("longname")
        if not name:
            raise NoResultError(ticker, "short name")
        return name
