"""Disk-based TTL cache for decoded Strapi response bodies.

Uses :mod:`diskcache` to persist raw JSON bodies on the filesystem with a
per-entry time-to-live. The interface is deliberately small:
:meth:`ResponseCache.remember` returns a cached value or runs a producer
and stores its result, :meth:`ResponseCache.forget` evicts a key.
diskcache gives atomic get/set/delete per key across threads and
processes; concurrent misses for the same key may each run the producer.

See Also:
    :func:`~strapi_cache.cache.keys.make_cache_key` -- builds the keys.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import diskcache

from strapi_cache.models import CacheConfig
from strapi_cache.output import get_output

_MISSING = object()


class ResponseCache:
    """Disk-backed key/value store with TTL.

    Args:
        cache_dir: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag).

    When the cache is disabled :meth:`remember` calls the producer every
    time and :meth:`forget` is a no-op.

    Example::

        cache = ResponseCache("/tmp/strapi-cache", CacheConfig())
        body = cache.remember("strapi-cache.single.abc", 600, lambda: fetch())
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def remember(self, key: str, ttl: int, producer: Callable[[], Any]) -> Any:
        """Return the value stored under *key*, producing and storing it on a miss.

        ``None`` is a legitimate stored value (Strapi answers ``null`` for
        missing entries), so misses are detected with a sentinel rather
        than by checking for ``None``.

        Args:
            key: Cache key.
            ttl: Lifetime of a newly stored value in seconds. ``0`` stores
                nothing.
            producer: Zero-argument callable invoked on a miss. Exceptions
                propagate and nothing is stored.

        Returns:
            The cached or freshly produced value.
        """
        if self._cache is None:
            return producer()

        value = self._cache.get(key, default=_MISSING)
        if value is not _MISSING:
            get_output().debug(f"Cache hit: {key}")
            return value

        get_output().debug(f"Cache miss: {key}")
        value = producer()
        if ttl > 0:
            self._cache.set(key, value, expire=ttl)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default*."""
        if self._cache is None:
            return default
        return self._cache.get(key, default=default)

    def has(self, key: str) -> bool:
        """Return whether an unexpired entry exists for *key*."""
        return self.get(key, default=_MISSING) is not _MISSING

    def forget(self, key: str) -> None:
        """Evict *key*. Missing keys are ignored."""
        if self._cache is None:
            return
        self._cache.delete(key)

    def clear(self) -> int:
        """Remove all entries from the cache and return how many were removed."""
        if self._cache is None:
            return 0
        return self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path) and
            ``volume`` (bytes on disk).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "responses"),
            "volume": self._cache.volume(),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
