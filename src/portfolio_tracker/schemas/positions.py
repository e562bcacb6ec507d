"""Pydantic schemas for records of the positions JSON document."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal

from portfolio_tracker.domain.models import Position, Purchase


class PurchaseRecord(BaseModel):
    """One entry of a position's `Purchases` array."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")

    date: Optional[str] = None
    quantity: float
    price: Optional[float] = None
    fees: Optional[float] = None

    def to_domain(self) -> Purchase:
        return Purchase(
            quantity=self.quantity,
            date=self.date,
            price=self.price,
            fees=self.fees,
        )


class PositionRecord(BaseModel):
    """One entry of the positions document (PascalCase keys)."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    ticker: Optional[str] = None
    asset_class: str
    amount: float = 0.0
    purchases: list[PurchaseRecord] = Field(default_factory=list)

    @field_validator("name", "ticker")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_domain(self) -> Position:
        return Position(
            name=self.name,
            ticker=self.ticker,
            asset_class=self.asset_class,
            amount=self.amount,
            purchases=[p.to_domain() for p in self.purchases],
        )
