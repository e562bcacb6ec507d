"""
Unit tests for KeyedFallbackCache and the QuoteCaches bundle.

Tests cover:
- Fetch-first behavior and storage on success
- Fallback to the last good value on failure
- Error propagation for unknown keys
- Sharing across concurrent tasks
"""

import asyncio
from datetime import date

import pytest

from portfolio_tracker.core.exceptions import NetworkError
from portfolio_tracker.services.quote_cache import KeyedFallbackCache, QuoteCaches


def succeed(value):
    async def fetch():
        return value

    return fetch


def fail(exc: Exception):
    async def fetch():
        raise exc

    return fetch


class TestGetOrFetch:
    """Tests for the get_or_fetch contract."""

    @pytest.mark.asyncio
    async def test_success_stores_value(self):
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")

        value = await cache.get_or_fetch("AAPL", succeed(185.5))

        assert value == 185.5
        assert cache.get("AAPL") == 185.5

    @pytest.mark.asyncio
    async def test_always_fetches_even_when_primed(self):
        """
        GIVEN a cache primed with 100 for AAPL
        WHEN a fetch returns 101
        THEN the fresh value is returned and stored
        """
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")
        cache.set("AAPL", 100.0)

        value = await cache.get_or_fetch("AAPL", succeed(101.0))

        assert value == 101.0
        assert cache.get("AAPL") == 101.0

    @pytest.mark.asyncio
    async def test_failure_returns_primed_value(self):
        """
        GIVEN a cache primed with V for K
        WHEN a subsequent fetch for K errors
        THEN V is returned, not the error
        """
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")
        await cache.get_or_fetch("AAPL", succeed(185.5))

        value = await cache.get_or_fetch("AAPL", fail(NetworkError("AAPL", "down")))

        assert value == 185.5

    @pytest.mark.asyncio
    async def test_failure_without_entry_propagates_original_error(self):
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")
        error = NetworkError("AAPL", "down")

        with pytest.raises(NetworkError) as exc_info:
            await cache.get_or_fetch("AAPL", fail(error))

        assert exc_info.value is error
        assert "AAPL" not in cache

    @pytest.mark.asyncio
    async def test_fallback_is_per_key(self):
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")
        await cache.get_or_fetch("AAPL", succeed(1.0))

        with pytest.raises(NetworkError):
            await cache.get_or_fetch("MSFT", fail(NetworkError("MSFT", "down")))

    @pytest.mark.asyncio
    async def test_tuple_keys(self):
        cache = KeyedFallbackCache("historic")

        await cache.get_or_fetch(("AAPL", date(2024, 1, 2)), succeed(99.0))

        assert cache.get(("AAPL", date(2024, 1, 2))) == 99.0
        assert cache.get(("AAPL", date(2024, 1, 3))) is None

    @pytest.mark.asyncio
    async def test_fallback_visible_across_concurrent_tasks(self):
        """
        GIVEN one task stores a value while others fail concurrently
        WHEN they all finish
        THEN every failing task received the stored value
        """
        cache: KeyedFallbackCache[str, float] = KeyedFallbackCache("test")
        stored = asyncio.Event()

        async def writer():
            value = await cache.get_or_fetch("AAPL", succeed(42.0))
            stored.set()
            return value

        async def failing_fetch():
            await stored.wait()
            raise NetworkError("AAPL", "down")

        results = await asyncio.gather(
            writer(),
            *(cache.get_or_fetch("AAPL", failing_fetch) for _ in range(5)),
        )

        assert results == [42.0] * 6
        assert len(cache) == 1


class TestQuoteCaches:
    """Tests for the cache bundle."""

    def test_caches_are_independent(self):
        caches = QuoteCaches()
        caches.latest_quote.set("AAPL", "latest")

        assert caches.previous_close.get("AAPL") is None
        assert caches.display_name.get("AAPL") is None

    def test_bundles_do_not_share_state(self):
        first, second = QuoteCaches(), QuoteCaches()
        first.display_name.set("AAPL", "Apple")

        assert second.display_name.get("AAPL") is None
