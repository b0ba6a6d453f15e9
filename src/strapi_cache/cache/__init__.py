"""Response caching for strapi-cache.

This package provides :class:`ResponseCache`, a TTL store backed by
:mod:`diskcache`, and :func:`make_cache_key`, the deterministic key
builder used by :class:`~strapi_cache.strapi.Strapi`.
"""

from strapi_cache.cache.cache import ResponseCache
from strapi_cache.cache.keys import CACHE_KEY, make_cache_key

__all__ = ["CACHE_KEY", "ResponseCache", "make_cache_key"]
