"""HTTP client module for strapi-cache.

Provides :class:`SyncClient`, a blocking client backed by
:class:`httpx.Client`, and :func:`build_query`, which assembles Strapi
query strings without re-encoding their structural characters.
"""

from strapi_cache.client.sync_client import SyncClient, build_query

__all__ = ["SyncClient", "build_query"]
