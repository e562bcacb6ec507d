"""Service layer: caching, resolution, valuation and refresh orchestration."""

from portfolio_tracker.services.quote_cache import KeyedFallbackCache, QuoteCaches
from portfolio_tracker.services.market_data_service import MarketDataService
from portfolio_tracker.services.position_resolver import PositionResolver
from portfolio_tracker.services.historic_aggregator import HistoricAggregator
from portfolio_tracker.services.performance_service import PerformanceService
from portfolio_tracker.services.refresh_orchestrator import LatestValueChannel, RefreshOrchestrator
from portfolio_tracker.services.purchase_editor import PurchaseEditor

__all__ = [
    "KeyedFallbackCache",
    "QuoteCaches",
    "MarketDataService",
    "PositionResolver",
    "HistoricAggregator",
    "PerformanceService",
    "LatestValueChannel",
    "RefreshOrchestrator",
    "PurchaseEditor",
]
