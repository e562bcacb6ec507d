"""Quote models returned by quote providers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Quote:
    """One closing price at a point in time."""

    close: float
    timestamp: datetime


@dataclass
class QuoteResponse:
    """
    Provider answer for a quote request.

    `quotes` holds every complete row of the response; `last` is the row of
    the most recent interval, or None when that interval has no close yet
    (e.g. the market is closed and the provider returned an empty bar).
    """

    quotes: list[Quote] = field(default_factory=list)
    last: Optional[Quote] = None

    def last_quote(self) -> Optional[Quote]:
        return self.last

    def quote_list(self) -> list[Quote]:
        return self.quotes

    def latest_close(self) -> Optional[float]:
        """Close of the last quote, falling back to the end of the list."""
        if self.last is not None:
            return self.last.close
        if self.quotes:
            return self.quotes[-1].close
        return None
