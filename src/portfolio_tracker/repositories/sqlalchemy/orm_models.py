"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, Integer, String

from portfolio_tracker.repositories.sqlalchemy.database import Base


class BalanceEntryORM(Base):
    """One recorded portfolio total value."""

    __tablename__ = "balance_history"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(String(64), nullable=False, index=True)
    # Stored as a decimal string, as written by the caller
    total_value = Column(String(64), nullable=False)
