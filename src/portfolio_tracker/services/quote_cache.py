"""Keyed last-known-good caches for remote quote answers."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from portfolio_tracker.domain.models import QuoteResponse

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class KeyedFallbackCache(Generic[K, V]):
    """
    Remembers the last successful answer per key and serves it when a fresh
    fetch fails.

    The fetch is always attempted first; entries are written only on
    success and never expire. One instance is shared by every concurrent
    resolution so a fallback written by one task is visible to all.
    """

    def __init__(self, name: str):
        self._name = name
        self._entries: dict[K, V] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    async def get_or_fetch(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        """
        Run `fetch`; store and return its value on success.

        On failure, return the stored value for `key` if there is one,
        otherwise re-raise the original error.
        """
        try:
            value = await fetch()
        except Exception as exc:
            cached = self._get(key)
            if cached is _MISSING:
                raise
            logger.debug("%s cache fallback for %r after error: %s", self._name, key, exc)
            return cached  # type: ignore[return-value]
        self.set(key, value)
        return value

    def get(self, key: K) -> Optional[V]:
        value = self._get(key)
        return None if value is _MISSING else value  # type: ignore[return-value]

    def set(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _get(self, key: K) -> object:
        with self._lock:
            return self._entries.get(key, _MISSING)


@dataclass
class QuoteCaches:
    """
    The four process-wide caches, constructed once at startup and passed to
    the resolver and the aggregator.
    """

    latest_quote: KeyedFallbackCache[str, QuoteResponse] = field(
        default_factory=lambda: KeyedFallbackCache("latest_quote")
    )
    previous_close: KeyedFallbackCache[str, float] = field(
        default_factory=lambda: KeyedFallbackCache("previous_close")
    )
    historic_quote: KeyedFallbackCache[tuple[str, date], QuoteResponse] = field(
        default_factory=lambda: KeyedFallbackCache("historic_quote")
    )
    display_name: KeyedFallbackCache[str, str] = field(
        default_factory=lambda: KeyedFallbackCache("display_name")
    )
