"""Domain models package."""

from portfolio_tracker.domain.models.enums import ConnectivityStatus, RefreshState
from portfolio_tracker.domain.models.position import Position, Purchase, UNKNOWN_NAME
from portfolio_tracker.domain.models.quote import Quote, QuoteResponse

__all__ = [
    "ConnectivityStatus",
    "RefreshState",
    "Position",
    "Purchase",
    "UNKNOWN_NAME",
    "Quote",
    "QuoteResponse",
]
