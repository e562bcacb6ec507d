"""View models for service outputs."""

from portfolio_tracker.domain.views.portfolio import (
    PositionView,
    ValuedPortfolio,
    PortfolioUpdate,
    SeriesUpdate,
    PerformanceData,
)

__all__ = [
    "PositionView",
    "ValuedPortfolio",
    "PortfolioUpdate",
    "SeriesUpdate",
    "PerformanceData",
]
