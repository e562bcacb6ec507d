"""Enumerations for domain models."""

from enum import Enum


class ConnectivityStatus(str, Enum):
    """Summary of a refresh cycle's resolution success rate."""

    CONNECTED = "CONNECTED"  # no failed resolution
    PARTIAL = "PARTIAL"
    DISCONNECTED = "DISCONNECTED"  # no successful resolution

    @classmethod
    def from_counts(cls, successes: int, failures: int) -> "ConnectivityStatus":
        """Derive the status from the success/failure counts of one cycle."""
        if failures == 0:
            return cls.CONNECTED
        if successes == 0:
            return cls.DISCONNECTED
        return cls.PARTIAL


class RefreshState(str, Enum):
    """States of one position refresh cycle."""

    IDLE = "IDLE"
    RESOLVING = "RESOLVING"
    AGGREGATED = "AGGREGATED"
    PUBLISHED = "PUBLISHED"
