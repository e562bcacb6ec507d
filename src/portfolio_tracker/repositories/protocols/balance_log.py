"""Balance log protocol for the historical total-value record."""

from typing import Protocol


class BalanceLog(Protocol):
    """Append-only log of (timestamp, total value) entries."""

    def append(self, timestamp: str, total_value: str) -> None:
        """Record the total value observed at a timestamp."""
        ...

    def last_value(self) -> float:
        """Last recorded total value; 0.0 when empty or unparseable."""
        ...

    def entries(self) -> list[tuple[str, str]]:
        """All entries in insertion order."""
        ...
