"""SQLAlchemy repository implementations."""

from portfolio_tracker.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_session,
    init_db,
    reset_database,
    Base,
)
from portfolio_tracker.repositories.sqlalchemy.balance_log_repo import SqlAlchemyBalanceLog

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyBalanceLog",
]
