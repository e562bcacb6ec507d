"""Refresh orchestrator: one-shot and periodic valuation cycles."""

import asyncio
import logging
from datetime import date
from typing import Callable, Generic, Optional, TypeVar

from portfolio_tracker.core.exceptions import PositionsSourceError
from portfolio_tracker.core.timezone import now_eastern, timestamp_string, today_eastern
from portfolio_tracker.domain.models import ConnectivityStatus, Position, RefreshState
from portfolio_tracker.domain.views import (
    PerformanceData,
    PortfolioUpdate,
    SeriesUpdate,
    ValuedPortfolio,
)
from portfolio_tracker.repositories.protocols import BalanceLog
from portfolio_tracker.services.performance_service import PerformanceService
from portfolio_tracker.services.position_resolver import PositionResolver
from portfolio_tracker.services.valuation import value_portfolio

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestValueChannel(Generic[T]):
    """
    Single-slot channel where the latest value wins.

    publish() never blocks: an unread value is replaced, so a slow consumer
    only ever sees the most recent cycle and intermediate ones are dropped.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=1)
        self.dropped = 0

    def publish(self, value: T) -> None:
        try:
            self._queue.get_nowait()
            self.dropped += 1
        except asyncio.QueueEmpty:
            pass
        self._queue.put_nowait(value)

    async def receive(self) -> T:
        return await self._queue.get()

    def poll(self) -> Optional[T]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None


class RefreshOrchestrator:
    """
    Drives position resolution and valuation, once or on a timer.

    Two independent cycles publish to their own single-slot channel:
    the position cycle (PortfolioUpdate) and the weekly series cycle
    (SeriesUpdate). Cycles of the same kind never overlap.
    """

    def __init__(
        self,
        load_positions: Callable[[], list[Position]],
        resolver: PositionResolver,
        performance: Optional[PerformanceService] = None,
        balance_log: Optional[BalanceLog] = None,
        refresh_interval: float = 60,
        series_interval: float = 3600,
        today: Callable[[], date] = today_eastern,
    ):
        self._load_positions = load_positions
        self._resolver = resolver
        self._performance = performance
        self._balance_log = balance_log
        self._refresh_interval = refresh_interval
        self._series_interval = series_interval
        self._today = today

        self.portfolio_updates: LatestValueChannel[PortfolioUpdate] = LatestValueChannel()
        self.series_updates: LatestValueChannel[SeriesUpdate] = LatestValueChannel()
        self.state = RefreshState.IDLE

        self._position_lock = asyncio.Lock()
        self._series_lock = asyncio.Lock()
        self._tasks: list[asyncio.Task] = []

    async def resolve_all(
        self,
        positions: list[Position],
    ) -> tuple[ValuedPortfolio, ConnectivityStatus]:
        """
        Resolve every position concurrently and value the successful ones.

        Failures are collected, never abort the batch; canonical order is
        kept in the result regardless of completion order.
        """
        results = await asyncio.gather(
            *(self._resolver.resolve(p) for p in positions),
            return_exceptions=True,
        )

        resolved: list[Position] = []
        failures: dict[str, str] = {}
        failure_count = 0
        for position, result in zip(positions, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                failure_count += 1
                message = getattr(result, "message", None) or str(result) or type(result).__name__
                failures[position.display_name] = message
                logger.warning("Could not resolve %s: %s", position.display_name, message)
                continue
            resolved.append(result)

        status = ConnectivityStatus.from_counts(len(resolved), failure_count)
        return value_portfolio(resolved, failures), status

    async def run_position_cycle(self) -> PortfolioUpdate:
        """Idle → Resolving → Aggregated → Published."""
        async with self._position_lock:
            self.state = RefreshState.RESOLVING
            try:
                positions = self._load_positions()
            except PositionsSourceError as exc:
                logger.error("Cannot read positions: %s", exc.message)
                update = PortfolioUpdate(error=exc.message, as_of=now_eastern())
                self.portfolio_updates.publish(update)
                self.state = RefreshState.IDLE
                return update

            portfolio, status = await self.resolve_all(positions)
            self.state = RefreshState.AGGREGATED

            update = PortfolioUpdate(portfolio=portfolio, status=status, as_of=now_eastern())
            self.portfolio_updates.publish(update)
            self.state = RefreshState.PUBLISHED
            logger.info(
                "Refreshed %d position(s), total %.2f, %s",
                len(portfolio.positions),
                portfolio.total_value,
                status.value,
            )
            return update

    async def run_series_cycle(self) -> Optional[SeriesUpdate]:
        """Recompute and publish the weekly historic value series."""
        if self._performance is None:
            return None
        async with self._series_lock:
            try:
                positions = self._load_positions()
            except PositionsSourceError as exc:
                logger.error("Cannot read positions for series: %s", exc.message)
                return None
            points = await self._performance.weekly_series(positions, self._today())
            update = SeriesUpdate(points=points, as_of=now_eastern())
            self.series_updates.publish(update)
            logger.info("Weekly series refreshed with %d point(s)", len(points))
            return update

    async def run_once(self, record: bool = False) -> PortfolioUpdate:
        """
        One position cycle for the CLI.

        With `record`, the new total is appended to the balance log.
        """
        update = await self.run_position_cycle()
        if record and update.portfolio is not None:
            self.record_balance(update.portfolio)
        return update

    async def compute_performance(self, portfolio: ValuedPortfolio) -> Optional[PerformanceData]:
        if self._performance is None:
            return None
        return await self._performance.performance(
            portfolio.positions, portfolio.total_value, self._today()
        )

    def record_balance(self, portfolio: ValuedPortfolio) -> None:
        if self._balance_log is None:
            return
        self._balance_log.append(timestamp_string(), f"{portfolio.total_value:.2f}")

    def start(self) -> None:
        """Start both periodic cycles as background tasks."""
        if any(not task.done() for task in self._tasks):
            return
        self._tasks = [
            asyncio.create_task(
                self._run_periodic("position", self.run_position_cycle, self._refresh_interval)
            ),
            asyncio.create_task(
                self._run_periodic("series", self.run_series_cycle, self._series_interval)
            ),
        ]

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self.state = RefreshState.IDLE

    @staticmethod
    async def _run_periodic(name: str, cycle, interval: float) -> None:
        """Run a cycle forever; a crash is logged and the next tick still runs."""
        while True:
            try:
                await cycle()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s cycle failed", name)
            await asyncio.sleep(interval)
