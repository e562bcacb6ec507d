"""Quote providers module."""

from portfolio_tracker.providers.quote_provider import QuoteProvider
from portfolio_tracker.providers.stub_provider import StubQuoteProvider
from portfolio_tracker.providers.yahoo_provider import YahooQuoteProvider

__all__ = [
    "QuoteProvider",
    "StubQuoteProvider",
    "YahooQuoteProvider",
]
