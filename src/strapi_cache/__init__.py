"""strapi-cache -- a caching, read-only client for the Strapi content API.

The package fetches collections, single entries, filtered queries, counts
and single types over HTTP, caches raw responses for a configurable time,
flattens Strapi's ``{id, attributes}`` envelope and rewrites relative
markdown image links into absolute URLs.

Typical use::

    from strapi_cache import Strapi, StrapiConfig

    with Strapi(StrapiConfig(url="https://cms.example.com/api", cache_time=600)) as strapi:
        posts = strapi.collection("articles", populate="author")

Modules:
    strapi: The query façade.
    envelope: Tagged-variant decoding of response bodies.
    normalize: Flattening of ``{id, attributes}`` entries.
    links: Markdown image link rewriting.
    cache: diskcache-backed TTL store and cache key builder.
    client: httpx-based HTTP client.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from strapi_cache.exceptions import (  # noqa: E402
    ConfigError,
    ConnectionError_,
    NotFound,
    PermissionDenied,
    StrapiError,
    UnknownError,
)
from strapi_cache.models import StrapiConfig  # noqa: E402
from strapi_cache.strapi import Strapi  # noqa: E402

__all__ = [
    "ConfigError",
    "ConnectionError_",
    "NotFound",
    "PermissionDenied",
    "Strapi",
    "StrapiConfig",
    "StrapiError",
    "UnknownError",
    "__version__",
]
