"""
Valuation engine: pure functions over resolved positions.

No I/O. Every per-position metric returns None when it cannot be
computed from the available data.
"""

from collections import defaultdict
from typing import Iterable, Optional

from portfolio_tracker.domain.models import Position
from portfolio_tracker.domain.views import PositionView, ValuedPortfolio


def balance(position: Position) -> Optional[float]:
    """Cash: the amount. Ticker-backed: last spot × effective quantity."""
    if position.is_cash:
        return position.amount
    if position.last_spot is None:
        return None
    return position.last_spot * position.effective_quantity


def total_invested(position: Position) -> Optional[float]:
    """Σ(quantity × price + fees) over lots with a known positive price."""
    complete = [p for p in position.purchases if p.is_complete]
    if not complete:
        return None
    return sum(p.cost for p in complete)


def average_cost(position: Position) -> Optional[float]:
    """Invested capital per unit, over lots with a known positive price."""
    complete = [p for p in position.purchases if p.is_complete]
    quantity = sum(p.quantity for p in complete)
    if not complete or quantity == 0:
        return None
    return sum(p.cost for p in complete) / quantity


def pnl(position: Position) -> Optional[float]:
    """Balance minus invested capital."""
    invested = total_invested(position)
    current = balance(position)
    if invested is None or current is None:
        return None
    return current - invested


def historic_variation_percent(position: Position) -> Optional[float]:
    invested = total_invested(position)
    profit = pnl(position)
    if profit is None or not invested:
        return None
    return profit / invested * 100


def daily_variation_percent(position: Position) -> Optional[float]:
    """Change of the last spot against the previous close, in percent."""
    if position.last_spot is None or position.previous_close is None:
        return None
    if position.previous_close <= 0:
        return None
    return (position.last_spot - position.previous_close) / position.previous_close * 100


def total_value(positions: Iterable[Position]) -> float:
    """Sum of computable balances."""
    return sum(b for b in (balance(p) for p in positions) if b is not None)


def securities_value(positions: Iterable[Position]) -> float:
    """Sum of computable balances of ticker-backed positions."""
    return total_value(p for p in positions if not p.is_cash)


def allocation(positions: Iterable[Position]) -> dict[str, float]:
    """
    Percentage of the total value per asset class (exact string match).

    Each position's own percentage is computed and then summed into its
    class, rather than dividing the class balance once. The two differ in
    the last floating-point digits; existing outputs depend on this form.
    """
    positions = list(positions)
    total = total_value(positions)
    result: dict[str, float] = defaultdict(float)
    if total == 0:
        return {}
    for position in positions:
        current = balance(position)
        if current is None:
            continue
        result[position.asset_class] += current / total * 100
    return dict(result)


def value_position(position: Position) -> PositionView:
    """Snapshot every metric of a position."""
    return PositionView(
        name=position.display_name,
        asset_class=position.asset_class,
        amount=position.effective_quantity,
        ticker=position.ticker,
        last_spot=position.last_spot,
        previous_close=position.previous_close,
        balance=balance(position),
        average_cost=average_cost(position),
        invested=total_invested(position),
        pnl=pnl(position),
        historic_variation_percent=historic_variation_percent(position),
        daily_variation_percent=daily_variation_percent(position),
    )


def value_portfolio(
    positions: list[Position],
    failures: Optional[dict[str, str]] = None,
) -> ValuedPortfolio:
    """Value a resolved portfolio, keeping its canonical order."""
    return ValuedPortfolio(
        positions=list(positions),
        views=[value_position(p) for p in positions],
        total_value=total_value(positions),
        allocation=allocation(positions),
        failures=dict(failures or {}),
    )
