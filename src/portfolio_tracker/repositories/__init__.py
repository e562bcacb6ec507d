"""Repositories: positions document and historical balance log."""

from portfolio_tracker.repositories.positions_file import PositionsFile
from portfolio_tracker.repositories.protocols import BalanceLog

__all__ = [
    "PositionsFile",
    "BalanceLog",
]
