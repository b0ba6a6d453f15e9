"""Tests for the ResponseCache module."""

from __future__ import annotations

import time

import pytest

from strapi_cache.cache import ResponseCache
from strapi_cache.models import CacheConfig


@pytest.fixture()
def cache(tmp_path):
    """Create an enabled ResponseCache pointing at tmp_path."""
    c = ResponseCache(tmp_path, CacheConfig(enabled=True))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path):
    """Create a disabled ResponseCache."""
    c = ResponseCache(tmp_path, CacheConfig(enabled=False))
    yield c
    c.close()


class Producer:
    """Callable that counts how often it was invoked."""

    def __init__(self, value) -> None:
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


# ------------------------------------------------------------------ #
# remember()
# ------------------------------------------------------------------ #


class TestRemember:
    def test_miss_runs_producer_and_stores(self, cache: ResponseCache) -> None:
        """A miss calls the producer once and stores its value."""
        producer = Producer({"data": [1, 2]})

        assert cache.remember("k", 60, producer) == {"data": [1, 2]}
        assert producer.calls == 1
        assert cache.get("k") == {"data": [1, 2]}

    def test_hit_skips_producer(self, cache: ResponseCache) -> None:
        """A hit returns the stored value without calling the producer."""
        producer = Producer(42)
        cache.remember("k", 60, producer)
        cache.remember("k", 60, producer)

        assert producer.calls == 1

    def test_none_is_a_cached_value(self, cache: ResponseCache) -> None:
        """A producer returning None still populates the entry."""
        producer = Producer(None)

        assert cache.remember("k", 60, producer) is None
        assert cache.remember("k", 60, producer) is None
        assert producer.calls == 1
        assert cache.has("k")

    def test_zero_ttl_stores_nothing(self, cache: ResponseCache) -> None:
        producer = Producer("body")
        cache.remember("k", 0, producer)
        cache.remember("k", 0, producer)

        assert producer.calls == 2
        assert not cache.has("k")

    def test_producer_exception_propagates(self, cache: ResponseCache) -> None:
        """Nothing is stored when the producer raises."""

        def boom():
            raise RuntimeError("network down")

        with pytest.raises(RuntimeError, match="network down"):
            cache.remember("k", 60, boom)
        assert not cache.has("k")

    def test_ttl_expiry(self, cache: ResponseCache) -> None:
        """Entries expire after their TTL."""
        producer = Producer("body")
        cache.remember("k", 1, producer)
        assert cache.has("k")

        time.sleep(1.5)

        assert not cache.has("k")
        cache.remember("k", 1, producer)
        assert producer.calls == 2


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_remember_always_calls_producer(self, disabled_cache: ResponseCache) -> None:
        producer = Producer("body")
        disabled_cache.remember("k", 60, producer)
        disabled_cache.remember("k", 60, producer)

        assert producer.calls == 2

    def test_get_returns_default(self, disabled_cache: ResponseCache) -> None:
        assert disabled_cache.get("k") is None
        assert disabled_cache.get("k", "fallback") == "fallback"
        assert not disabled_cache.has("k")

    def test_forget_and_clear_are_noops(self, disabled_cache: ResponseCache) -> None:
        disabled_cache.forget("k")
        assert disabled_cache.clear() == 0

    def test_disabled_stats(self, disabled_cache: ResponseCache) -> None:
        """Stats for a disabled cache report enabled=False."""
        assert disabled_cache.stats() == {"enabled": False}
        assert disabled_cache.enabled is False


# ------------------------------------------------------------------ #
# forget() and clear()
# ------------------------------------------------------------------ #


class TestForgetAndClear:
    def test_forget_removes_specific_entry(self, cache: ResponseCache) -> None:
        """forget() removes only the targeted entry."""
        cache.remember("a", 60, Producer(1))
        cache.remember("b", 60, Producer(2))

        cache.forget("a")

        assert not cache.has("a")
        assert cache.get("b") == 2

    def test_forget_nonexistent_key_no_error(self, cache: ResponseCache) -> None:
        cache.forget("nope")

    def test_clear_removes_all_entries(self, cache: ResponseCache) -> None:
        """clear() empties the cache and reports the count."""
        cache.remember("a", 60, Producer(1))
        cache.remember("b", 60, Producer(2))

        assert cache.clear() == 2
        assert not cache.has("a")
        assert not cache.has("b")


# ------------------------------------------------------------------ #
# Stats
# ------------------------------------------------------------------ #


class TestStats:
    def test_stats_reports_size_and_directory(self, cache: ResponseCache, tmp_path) -> None:
        cache.remember("a", 60, Producer(1))

        s = cache.stats()

        assert s["enabled"] is True
        assert s["size"] == 1
        assert s["directory"] == str(tmp_path / "responses")
        assert s["volume"] > 0

    def test_entries_survive_reopen(self, tmp_path) -> None:
        """Entries persist on disk across cache instances."""
        first = ResponseCache(tmp_path, CacheConfig())
        first.remember("a", 60, Producer("body"))
        first.close()

        second = ResponseCache(tmp_path, CacheConfig())
        try:
            assert second.get("a") == "body"
        finally:
            second.close()
