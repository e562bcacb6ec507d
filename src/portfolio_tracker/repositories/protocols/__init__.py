"""Repository protocol definitions (interfaces)."""

from portfolio_tracker.repositories.protocols.balance_log import BalanceLog

__all__ = [
    "BalanceLog",
]
