"""SQLAlchemy implementation of BalanceLog."""

import logging

from sqlalchemy.orm import Session

from portfolio_tracker.repositories.sqlalchemy.orm_models import BalanceEntryORM

logger = logging.getLogger(__name__)


class SqlAlchemyBalanceLog:
    """SQLAlchemy-backed append-only balance log."""

    def __init__(self, db: Session):
        self._db = db

    def append(self, timestamp: str, total_value: str) -> None:
        """Record the total value observed at a timestamp."""
        self._db.add(BalanceEntryORM(timestamp=timestamp, total_value=total_value))
        self._db.commit()

    def last_value(self) -> float:
        """Last recorded total value; 0.0 when empty or unparseable."""
        entry = (
            self._db.query(BalanceEntryORM)
            .order_by(BalanceEntryORM.entry_id.desc())
            .first()
        )
        if entry is None:
            return 0.0
        try:
            return float(entry.total_value)
        except (TypeError, ValueError):
            logger.warning("Unparseable balance log entry at %s: %r", entry.timestamp, entry.total_value)
            return 0.0

    def entries(self) -> list[tuple[str, str]]:
        """All entries in insertion order."""
        rows = self._db.query(BalanceEntryORM).order_by(BalanceEntryORM.entry_id).all()
        return [(row.timestamp, row.total_value) for row in rows]
