"""Position and Purchase domain models."""

from dataclasses import dataclass, field
from typing import Optional

UNKNOWN_NAME = "Unknown"


@dataclass
class Purchase:
    """
    One buy event (lot) contributing to cost basis.

    A lot without a known positive price is incomplete; the resolver
    backfills it from historic quotes when its date can be parsed.
    """

    quantity: float
    date: Optional[str] = None
    price: Optional[float] = None
    fees: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.price is not None and self.price > 0

    @property
    def cost(self) -> float:
        """quantity × price + fees; only meaningful for complete lots."""
        return self.quantity * (self.price or 0.0) + (self.fees or 0.0)


@dataclass
class Position:
    """
    One declared holding: cash (no ticker) or ticker-backed.

    When purchases are declared, their summed quantity overrides `amount`.
    `last_spot` and `previous_close` are owned by the resolver.
    """

    asset_class: str
    amount: float = 0.0
    name: Optional[str] = None
    ticker: Optional[str] = None
    purchases: list[Purchase] = field(default_factory=list)
    last_spot: Optional[float] = None
    previous_close: Optional[float] = None

    def __post_init__(self) -> None:
        if self.purchases:
            self.amount = sum(p.quantity for p in self.purchases)

    @property
    def is_cash(self) -> bool:
        return self.ticker is None

    @property
    def effective_quantity(self) -> float:
        """Sum of lot quantities when lots exist, else the declared amount."""
        if self.purchases:
            return sum(p.quantity for p in self.purchases)
        return self.amount

    @property
    def display_name(self) -> str:
        return self.name or self.ticker or UNKNOWN_NAME

    @property
    def incomplete_purchases(self) -> list[Purchase]:
        return [p for p in self.purchases if not p.is_complete]
