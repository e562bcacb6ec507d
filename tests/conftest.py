"""
Pytest configuration and fixtures for portfolio tracker tests.

This module provides:
- Deterministic and failing fake quote providers
- Factory helpers for positions, purchases and quote responses
- Service fixtures wired around a fixed market date
- In-memory SQLite fixtures for the balance log
"""

import asyncio
import json
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional, Union

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session

from portfolio_tracker.config.settings import reset_settings
from portfolio_tracker.core.exceptions import NetworkError, TickerNotFoundError
from portfolio_tracker.core.timezone import EASTERN_TZ
from portfolio_tracker.domain.models import Position, Purchase, Quote, QuoteResponse
from portfolio_tracker.repositories import PositionsFile
from portfolio_tracker.repositories.sqlalchemy import Base, SqlAlchemyBalanceLog
# Import ORM models to register them with Base before creating tables
from portfolio_tracker.repositories.sqlalchemy import orm_models  # noqa: F401
from portfolio_tracker.services import (
    HistoricAggregator,
    MarketDataService,
    PerformanceService,
    PositionResolver,
    QuoteCaches,
    RefreshOrchestrator,
)


# Friday; the trailing week holds five trading days
TODAY = date(2024, 6, 14)


# =============================================================================
# QUOTE HELPERS
# =============================================================================


def at_close(day: date) -> datetime:
    """Localized 16:00 US/Eastern timestamp for a trading day."""
    return EASTERN_TZ.localize(datetime.combine(day, time(16, 0)))


def quote_response(*closes: float, last_missing: bool = False, end: date = TODAY) -> QuoteResponse:
    """
    Build a response of daily quotes ending at `end`.

    With last_missing, the final interval has no close (market closed).
    """
    quotes = [
        Quote(close=close, timestamp=at_close(end - timedelta(days=len(closes) - 1 - i)))
        for i, close in enumerate(closes)
    ]
    last = None if last_missing or not quotes else quotes[-1]
    return QuoteResponse(quotes=quotes, last=last)


# =============================================================================
# FAKE PROVIDERS
# =============================================================================


Outcome = Union[QuoteResponse, Exception]


class FakeQuoteProvider:
    """
    Deterministic in-memory quote provider.

    Latest responses, daily close histories and names are configured per
    ticker; an Exception value makes the call raise it. Unknown tickers
    raise TickerNotFoundError. Every call is recorded.
    """

    def __init__(self):
        self.latest: dict[str, Outcome] = {}
        self.history: dict[str, Union[dict[date, float], Exception]] = {}
        self.names: dict[str, Union[str, Exception]] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def set_history(self, ticker: str, closes: dict[date, float]) -> None:
        self.history[ticker] = closes

    def set_flat_history(self, ticker: str, close: float, start: date, end: date = TODAY) -> None:
        day, closes = start, {}
        while day <= end:
            if day.weekday() < 5:
                closes[day] = close
            day += timedelta(days=1)
        self.history[ticker] = closes

    async def _enter(self, ticker: str) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(ticker, 0))
        finally:
            self.in_flight -= 1

    async def latest_price(self, ticker: str) -> QuoteResponse:
        self.calls.append(("latest_price", ticker))
        await self._enter(ticker)
        outcome = self.latest.get(ticker)
        if outcome is None:
            raise TickerNotFoundError(ticker)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def price_history(self, ticker: str, start: date, end: date) -> QuoteResponse:
        self.calls.append(("price_history", ticker, start, end))
        await self._enter(ticker)
        closes = self.history.get(ticker)
        if closes is None:
            raise TickerNotFoundError(ticker)
        if isinstance(closes, Exception):
            raise closes
        quotes = [
            Quote(close=close, timestamp=at_close(day))
            for day, close in sorted(closes.items())
            if start <= day <= end
        ]
        return QuoteResponse(quotes=quotes, last=quotes[-1] if quotes else None)

    async def search_name(self, ticker: str) -> str:
        self.calls.append(("search_name", ticker))
        name = self.names.get(ticker)
        if name is None:
            raise TickerNotFoundError(ticker)
        if isinstance(name, Exception):
            raise name
        return name

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


class FailingQuoteProvider:
    """Quote provider that always raises a network error."""

    async def latest_price(self, ticker: str) -> QuoteResponse:
        raise NetworkError(ticker, "Network unavailable")

    async def price_history(self, ticker: str, start: date, end: date) -> QuoteResponse:
        raise NetworkError(ticker, "Network unavailable")

    async def search_name(self, ticker: str) -> str:
        raise NetworkError(ticker, "Network unavailable")


# =============================================================================
# DOMAIN FACTORIES
# =============================================================================


def make_position(
    ticker: Optional[str] = None,
    amount: float = 0.0,
    asset_class: str = "Stocks",
    name: Optional[str] = None,
    purchases: Optional[list[Purchase]] = None,
) -> Position:
    return Position(
        asset_class=asset_class,
        amount=amount,
        name=name,
        ticker=ticker,
        purchases=purchases or [],
    )


def make_cash(amount: float, name: str = "Cash") -> Position:
    return make_position(amount=amount, asset_class="Cash", name=name)


def assert_float_equal(actual: Optional[float], expected: float, tolerance: float = 1e-9) -> None:
    """Assert that two floats are equal within tolerance."""
    assert actual is not None, f"Expected {expected}, got None"
    assert abs(actual - expected) <= tolerance, f"Expected {expected}, got {actual}"


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings():
    """Keep global settings isolated between tests."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def provider() -> FakeQuoteProvider:
    return FakeQuoteProvider()


@pytest.fixture
def failing_provider() -> FailingQuoteProvider:
    return FailingQuoteProvider()


@pytest.fixture
def caches() -> QuoteCaches:
    return QuoteCaches()


@pytest.fixture
def market_data(provider, caches) -> MarketDataService:
    return MarketDataService(provider=provider, caches=caches, today=lambda: TODAY)


@pytest.fixture
def resolver(market_data) -> PositionResolver:
    return PositionResolver(market_data)


@pytest.fixture
def aggregator(market_data) -> HistoricAggregator:
    return HistoricAggregator(market_data)


@pytest.fixture
def performance_service(aggregator) -> PerformanceService:
    return PerformanceService(aggregator=aggregator, max_points=78, fetch_timeout=1.0)


@pytest.fixture
def orchestrator_factory(resolver, performance_service):
    """Factory for orchestrators over a fixed list of declared positions."""

    def _create(positions_loader, balance_log=None) -> RefreshOrchestrator:
        return RefreshOrchestrator(
            load_positions=positions_loader,
            resolver=resolver,
            performance=performance_service,
            balance_log=balance_log,
            refresh_interval=0.01,
            series_interval=0.01,
            today=lambda: TODAY,
        )

    return _create


# =============================================================================
# FILE AND DATABASE FIXTURES
# =============================================================================


SAMPLE_DOCUMENT = [
    {"Name": "Savings", "AssetClass": "Cash", "Amount": 1000.0},
    {
        "Name": "Apple",
        "Ticker": "AAPL",
        "AssetClass": "Stocks",
        "Amount": 0,
        "Note": "kept by edits",
        "Purchases": [
            {"Date": "2024-01-02", "Quantity": 10, "Price": 100.0, "Fees": 5.0},
        ],
    },
    {"Ticker": "MSFT", "AssetClass": "Stocks", "Amount": 2.0},
]


@pytest.fixture
def positions_path(tmp_path: Path) -> Path:
    path = tmp_path / "positions.json"
    path.write_text(json.dumps(SAMPLE_DOCUMENT), encoding="utf-8")
    return path


@pytest.fixture
def positions_file(positions_path: Path) -> PositionsFile:
    return PositionsFile(positions_path)


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def balance_log(test_session) -> SqlAlchemyBalanceLog:
    return SqlAlchemyBalanceLog(test_session)
