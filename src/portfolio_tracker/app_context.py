"""Application context: wires settings, caches, provider and services.

The caches are created once here and shared by every service for the
lifetime of the context (normally the process).
"""

from typing import Optional

from sqlalchemy.orm import Session

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.core.exceptions import PositionsSourceError
from portfolio_tracker.domain.models import Position
from portfolio_tracker.providers import QuoteProvider, StubQuoteProvider, YahooQuoteProvider
from portfolio_tracker.repositories import PositionsFile
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyBalanceLog,
    get_session,
    init_db,
    reset_database,
)
from portfolio_tracker.services import (
    HistoricAggregator,
    MarketDataService,
    PerformanceService,
    PositionResolver,
    PurchaseEditor,
    QuoteCaches,
    RefreshOrchestrator,
)


def build_provider(name: str) -> QuoteProvider:
    """Return the quote provider selected by name."""
    if name == "stub":
        return StubQuoteProvider()
    if name == "yahoo":
        return YahooQuoteProvider()
    raise ValueError(f"Unknown quote provider: {name}")


class AppContext:
    """
    Application context providing access to all services.

    Services are created lazily and kept for the lifetime of the context.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[QuoteProvider] = None,
    ):
        self._settings = settings or get_settings()
        self._provider = provider
        self._session: Optional[Session] = None

        self._caches = QuoteCaches()
        self._market_data: Optional[MarketDataService] = None
        self._resolver: Optional[PositionResolver] = None
        self._aggregator: Optional[HistoricAggregator] = None
        self._performance: Optional[PerformanceService] = None
        self._positions_file: Optional[PositionsFile] = None
        self._balance_log: Optional[SqlAlchemyBalanceLog] = None
        self._orchestrator: Optional[RefreshOrchestrator] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def caches(self) -> QuoteCaches:
        return self._caches

    @property
    def provider(self) -> QuoteProvider:
        if self._provider is None:
            self._provider = build_provider(self._settings.quote_provider)
        return self._provider

    @property
    def market_data(self) -> MarketDataService:
        if self._market_data is None:
            self._market_data = MarketDataService(
                provider=self.provider,
                caches=self._caches,
                history_buffer_days=self._settings.history_buffer_days,
                previous_close_window_days=self._settings.previous_close_window_days,
            )
        return self._market_data

    @property
    def resolver(self) -> PositionResolver:
        if self._resolver is None:
            self._resolver = PositionResolver(self.market_data)
        return self._resolver

    @property
    def aggregator(self) -> HistoricAggregator:
        if self._aggregator is None:
            self._aggregator = HistoricAggregator(self.market_data)
        return self._aggregator

    @property
    def performance(self) -> PerformanceService:
        if self._performance is None:
            self._performance = PerformanceService(
                aggregator=self.aggregator,
                max_points=self._settings.series_max_points,
                fetch_timeout=self._settings.historic_fetch_timeout_seconds,
            )
        return self._performance

    @property
    def positions_file(self) -> PositionsFile:
        if self._positions_file is None:
            if self._settings.positions_file is None:
                raise PositionsSourceError("No positions file configured")
            self._positions_file = PositionsFile(self._settings.positions_file)
        return self._positions_file

    @property
    def purchase_editor(self) -> PurchaseEditor:
        return PurchaseEditor(self.positions_file)

    @property
    def balance_log(self) -> SqlAlchemyBalanceLog:
        if self._balance_log is None:
            init_db()
            self._session = get_session()
            self._balance_log = SqlAlchemyBalanceLog(self._session)
        return self._balance_log

    def load_positions(self) -> list[Position]:
        """Fresh positions from the document, one call per refresh cycle."""
        return self.positions_file.load_positions()

    @property
    def orchestrator(self) -> RefreshOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = RefreshOrchestrator(
                load_positions=self.load_positions,
                resolver=self.resolver,
                performance=self.performance,
                balance_log=self.balance_log,
                refresh_interval=self._settings.refresh_interval_seconds,
                series_interval=self._settings.series_refresh_interval_seconds,
            )
        return self._orchestrator

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
            self._balance_log = None
            reset_database()
