"""Portfolio tracker: live valuation of cash and ticker-backed positions."""

__version__ = "0.1.0"
