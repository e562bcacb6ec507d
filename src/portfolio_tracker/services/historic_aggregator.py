"""Historic aggregator: total portfolio value at a past date."""

import asyncio
import logging
from datetime import date
from typing import Optional

from portfolio_tracker.core.exceptions import AggregationError, BadRequestError
from portfolio_tracker.domain.models import Position
from portfolio_tracker.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)


class HistoricAggregator:
    """
    Reconstructs the portfolio value at an arbitrary past date.

    Ticker prices are fetched concurrently, one call per position. A
    ticker that fails is left out of the sum; the aggregate only fails when
    nothing positive remains and at least one warning was recorded.
    """

    def __init__(self, market_data: MarketDataService, fetch_timeout: Optional[float] = None):
        self._market = market_data
        self._fetch_timeout = fetch_timeout

    async def historic_total_value(
        self,
        positions: list[Position],
        at_date: date,
        securities_only: bool = False,
        fetch_timeout: Optional[float] = None,
    ) -> float:
        """
        Value of `positions` at `at_date`.

        Cash is added at its amount unless `securities_only`. Bad-request
        class errors (including unknown tickers) are skipped silently; any
        other error becomes a warning. Raises AggregationError with the
        joined warnings only on total failure.
        """
        timeout = fetch_timeout if fetch_timeout is not None else self._fetch_timeout
        cash = [p for p in positions if p.is_cash]
        securities = [p for p in positions if not p.is_cash]

        total = 0.0 if securities_only else sum(p.amount for p in cash)

        results = await asyncio.gather(
            *(self._market.close_at(p.ticker, at_date, timeout=timeout) for p in securities),
            return_exceptions=True,
        )

        warnings: list[str] = []
        for position, result in zip(securities, results):
            if isinstance(result, BadRequestError):
                logger.debug("Skipping %s at %s: %s", position.ticker, at_date, result.message)
                continue
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                message = getattr(result, "message", None) or str(result) or type(result).__name__
                warnings.append(f"{position.ticker}: {message}")
                continue
            total += result * position.effective_quantity

        if warnings:
            logger.warning("Historic value at %s is missing %d ticker(s)", at_date, len(warnings))
        if total <= 0 and warnings:
            raise AggregationError(warnings)
        return total
