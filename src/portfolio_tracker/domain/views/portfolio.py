"""View models for valuation and refresh outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from portfolio_tracker.domain.models import ConnectivityStatus, Position


@dataclass
class PositionView:
    """
    Valued snapshot of a single position.

    Numeric metrics are None when they cannot be computed from the
    available data; consumers render a placeholder, not a zero.
    """

    name: str
    asset_class: str
    amount: float
    ticker: Optional[str] = None
    last_spot: Optional[float] = None
    previous_close: Optional[float] = None
    balance: Optional[float] = None
    average_cost: Optional[float] = None
    invested: Optional[float] = None
    pnl: Optional[float] = None
    historic_variation_percent: Optional[float] = None
    daily_variation_percent: Optional[float] = None


@dataclass
class ValuedPortfolio:
    """Successfully resolved positions in canonical order, with aggregates."""

    positions: list[Position] = field(default_factory=list)
    views: list[PositionView] = field(default_factory=list)
    total_value: float = 0.0
    allocation: dict[str, float] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def sorted_by_balance(self) -> list[PositionView]:
        """Views by descending balance, for display only."""
        return sorted(self.views, key=lambda v: v.balance or 0.0, reverse=True)


@dataclass
class PortfolioUpdate:
    """Payload published after each position refresh cycle."""

    portfolio: Optional[ValuedPortfolio] = None
    status: Optional[ConnectivityStatus] = None
    error: Optional[str] = None
    as_of: Optional[datetime] = None


@dataclass
class SeriesUpdate:
    """Payload published after each weekly series cycle."""

    points: list[tuple[int, float]] = field(default_factory=list)
    as_of: Optional[datetime] = None


@dataclass
class PerformanceData:
    """Percentage change of the total value over standard horizons."""

    ytd: Optional[float] = None
    monthly: Optional[float] = None
    recent: Optional[float] = None
