"""Performance service: period returns and the weekly value series."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

from portfolio_tracker.core.exceptions import AggregationError, ParseError
from portfolio_tracker.core.timezone import parse_date
from portfolio_tracker.domain.models import Position
from portfolio_tracker.domain.views import PerformanceData
from portfolio_tracker.services.historic_aggregator import HistoricAggregator

logger = logging.getLogger(__name__)

MONTHLY_DAYS = 30
RECENT_DAYS = 7
DEFAULT_SERIES_WEEKS = 52


def percent_change(current: float, past: Optional[float]) -> Optional[float]:
    """Change from `past` to `current` in percent; None when past is unknown or not positive."""
    if past is None or past <= 0:
        return None
    return (current - past) / past * 100


def earliest_purchase_date(positions: list[Position]) -> Optional[date]:
    """Earliest parseable lot date across positions."""
    dates = []
    for position in positions:
        for purchase in position.purchases:
            try:
                dates.append(parse_date(purchase.date, field="purchase date"))
            except ParseError:
                continue
    return min(dates) if dates else None


class PerformanceService:
    """
    Computes YTD / monthly / recent performance and the weekly series of
    historic total values.
    """

    def __init__(
        self,
        aggregator: HistoricAggregator,
        max_points: int = 78,
        fetch_timeout: Optional[float] = None,
    ):
        self._aggregator = aggregator
        self._max_points = max_points
        self._fetch_timeout = fetch_timeout

    async def performance(
        self,
        positions: list[Position],
        current_total: float,
        today: date,
    ) -> PerformanceData:
        """Percentage change of `current_total` against past totals."""
        horizons = [
            date(today.year, 1, 1),
            today - timedelta(days=MONTHLY_DAYS),
            today - timedelta(days=RECENT_DAYS),
        ]
        past_totals = await asyncio.gather(
            *(self._past_total(positions, day) for day in horizons)
        )
        ytd, monthly, recent = (percent_change(current_total, past) for past in past_totals)
        return PerformanceData(ytd=ytd, monthly=monthly, recent=recent)

    async def _past_total(self, positions: list[Position], day: date) -> Optional[float]:
        try:
            return await self._aggregator.historic_total_value(positions, day)
        except AggregationError as exc:
            logger.warning("Historic value at %s unavailable: %s", day, exc.message)
            return None

    def week_grid(self, positions: list[Position], today: date) -> list[date]:
        """Weekly dates ending today, capped to the most recent max_points."""
        start = earliest_purchase_date(positions) or today - timedelta(weeks=DEFAULT_SERIES_WEEKS)
        if start > today:
            start = today
        grid = []
        day = start
        while day <= today:
            grid.append(day)
            day += timedelta(weeks=1)
        return grid[-max(self._max_points, 1):]

    async def weekly_series(self, positions: list[Position], today: date) -> list[tuple[int, float]]:
        """
        Historic total value per week as (week_index, value).

        Each per-ticker fetch is bounded by the fetch timeout; weeks whose
        aggregate fails are omitted, keeping their index free.
        """
        points: list[tuple[int, float]] = []
        for index, day in enumerate(self.week_grid(positions, today)):
            try:
                value = await self._aggregator.historic_total_value(
                    positions, day, fetch_timeout=self._fetch_timeout
                )
            except AggregationError as exc:
                logger.debug("Week %d (%s) omitted: %s", index, day, exc.message)
                continue
            points.append((index, value))
        return points
