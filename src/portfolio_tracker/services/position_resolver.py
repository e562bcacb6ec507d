"""Position resolver: attaches live prices and derived fields to a position."""

import logging

from portfolio_tracker.core.exceptions import NoResultError, ParseError
from portfolio_tracker.core.timezone import parse_date
from portfolio_tracker.domain.models import Position
from portfolio_tracker.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)


class PositionResolver:
    """
    Resolves one declared position against the market data service.

    The latest price is required: failing to get it fails the position.
    Previous close, purchase price backfill and display name are
    best-effort and never abort resolution.
    """

    def __init__(self, market_data: MarketDataService):
        self._market = market_data

    async def resolve(self, position: Position) -> Position:
        """
        Resolve a position in place and return it.

        Cash positions are returned unchanged without any network call.
        Raises QuoteError when the latest price cannot be obtained.
        """
        if position.is_cash:
            return position

        ticker = position.ticker
        response = await self._market.latest_quote(ticker)
        spot = response.latest_close()
        if spot is None:
            raise NoResultError(ticker, "latest quote")
        position.last_spot = spot

        await self._fill_previous_close(position)
        await self._backfill_purchases(position)
        await self._fill_name(position)
        return position

    async def _fill_previous_close(self, position: Position) -> None:
        try:
            position.previous_close = await self._market.previous_close(position.ticker)
        except Exception as exc:
            logger.debug("No previous close for %s: %s", position.ticker, exc)

    async def _backfill_purchases(self, position: Position) -> None:
        """Fill missing lot prices from the historic close at the lot date."""
        for purchase in position.incomplete_purchases:
            try:
                day = parse_date(purchase.date, field="purchase date")
            except ParseError:
                # Left incomplete; it never contributes to cost basis
                continue
            try:
                close = await self._market.close_at(position.ticker, day)
            except Exception as exc:
                logger.debug("Cannot backfill %s lot of %s: %s", position.ticker, purchase.date, exc)
                continue
            purchase.price = max(close, 0.0)

    async def _fill_name(self, position: Position) -> None:
        if position.name:
            return
        try:
            position.name = await self._market.display_name(position.ticker)
        except Exception as exc:
            logger.debug("No display name for %s: %s", position.ticker, exc)
