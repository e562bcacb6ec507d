"""Pydantic schemas for declared data."""

from portfolio_tracker.schemas.positions import PositionRecord, PurchaseRecord

__all__ = [
    "PositionRecord",
    "PurchaseRecord",
]
