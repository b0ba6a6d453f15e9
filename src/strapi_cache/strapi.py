"""Caching read-only façade over the Strapi content API.

:class:`Strapi` exposes five read operations -- :meth:`~Strapi.collection`,
:meth:`~Strapi.collection_count`, :meth:`~Strapi.entry`,
:meth:`~Strapi.entries_by_field` and :meth:`~Strapi.single` -- which all
follow the same sequence:

1. build a deterministic cache key from the operation name and every
   parameter (:func:`~strapi_cache.cache.make_cache_key`);
2. return the cached raw body, or send one GET and cache its decoded body
   for ``cache_time`` seconds;
3. classify the body (:func:`~strapi_cache.envelope.decode_body`) and
   validate it for the operation, evicting the cache entry and raising
   :class:`~strapi_cache.exceptions.PermissionDenied`,
   :class:`~strapi_cache.exceptions.NotFound` or
   :class:`~strapi_cache.exceptions.UnknownError` when it does not fit;
4. rewrite relative markdown image links and flatten ``{id, attributes}``
   entries before returning.

Only raw bodies are cached. ``full_urls`` and normalization are applied on
every call, so they are not part of the cache key.

Example::

    from strapi_cache import Strapi, StrapiConfig

    with Strapi(StrapiConfig(url="https://cms.example.com/api")) as strapi:
        articles = strapi.collection("articles", "publishedAt", "ASC", populate="author")
        about = strapi.single("about", pluck="body")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, NoReturn, Optional

import httpx

from strapi_cache.cache import ResponseCache, make_cache_key
from strapi_cache.client import SyncClient, build_query
from strapi_cache.config import get_cache_dir
from strapi_cache.envelope import (
    CollectionEnvelope,
    EntityEnvelope,
    Envelope,
    ErrorEnvelope,
    NullBody,
    decode_body,
)
from strapi_cache.exceptions import NotFound, PermissionDenied, UnknownError
from strapi_cache.links import rewrite_fields, rewrite_item
from strapi_cache.models import StrapiConfig
from strapi_cache.normalize import transform_data
from strapi_cache.output import get_output


class Strapi:
    """Read-only Strapi client with response caching and shape normalization.

    Args:
        config: Base URL, cache TTL and request settings.
        cache: Cache store to use. When omitted a :class:`ResponseCache` is
            created in ``config.cache.directory`` (or the XDG cache
            directory) and closed together with the façade.
        client: HTTP client to use. When omitted a :class:`SyncClient` is
            built from *config*.
        transport: Optional httpx transport for the default client.

    The façade opens its HTTP client lazily on the first fetch; using it
    as a context manager guarantees that the client is closed again.
    """

    def __init__(
        self,
        config: StrapiConfig,
        cache: Optional[ResponseCache] = None,
        client: Optional[SyncClient] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._owns_cache = cache is None
        if cache is None:
            cache_dir = Path(config.cache.directory) if config.cache.directory else get_cache_dir()
            cache = ResponseCache(cache_dir, config.cache)
        self._cache = cache
        self._client = client if client is not None else SyncClient(config, transport=transport)

    @property
    def config(self) -> StrapiConfig:
        return self._config

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Strapi:
        self._client.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client, and the cache if the façade created it."""
        self._client.close()
        if self._owns_cache:
            self._cache.close()

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def collection(
        self,
        type: str,
        sort_key: str = "id",
        sort_order: str = "DESC",
        limit: int = 20,
        start: int = 0,
        full_urls: bool = True,
        populate: Optional[str] = None,
    ) -> list[Any]:
        """Fetch a page of a collection type.

        Sends ``GET /<type>?_sort=<key>:<order>&_limit=<limit>&_start=<start>``
        with ``&populate=<populate>`` appended when given.

        Args:
            type: Content type name, e.g. ``articles``.
            sort_key: Field to sort on.
            sort_order: ``ASC`` or ``DESC``.
            limit: Page size.
            start: Offset of the first entry.
            full_urls: Rewrite relative markdown image links to absolute URLs.
            populate: Comma-separated relations to inline and normalize.

        Returns:
            Normalized entries in the order Strapi returned them.

        Raises:
            PermissionDenied: The body carried a 403 status.
            NotFound: The body was null.
            UnknownError: The body was not a collection.
        """
        key = self.cache_key(
            "collection",
            type=type,
            sort_key=sort_key,
            sort_order=sort_order,
            limit=limit,
            start=start,
            populate=populate,
        )
        pairs: list[tuple[str, Any]] = [
            ("_sort", f"{sort_key}:{sort_order}"),
            ("_limit", limit),
            ("_start", start),
        ]
        if populate:
            pairs.append(("populate", populate))

        envelope = decode_body(self._remember(key, type, build_query(pairs)))
        items = self._expect_collection(envelope, key, type)
        return self._normalize_items(items, full_urls, populate)

    def collection_count(self, type: str) -> int:
        """Return the number of entries in a collection type (``GET /<type>/count``).

        Raises:
            PermissionDenied: The body carried a 403 status.
            NotFound: The body was null.
            UnknownError: The body was not an integer.
        """
        key = self.cache_key("collectionCount", type=type)
        body = self._remember(key, f"{type}/count")
        if isinstance(body, int) and not isinstance(body, bool):
            return body

        envelope = decode_body(body)
        self._forget(key, envelope)
        self._raise_for(envelope, type, expected="an integer count")

    def entry(self, type: str, id: int | str, full_urls: bool = True) -> dict[str, Any]:
        """Fetch one entry of a collection type (``GET /<type>/<id>``).

        The entry is returned in the flat shape Strapi sent it; its
        ``attributes`` (if any) are not unwrapped.

        Raises:
            PermissionDenied: The body carried a 403 status.
            NotFound: The body was null.
            UnknownError: The body had no ``id``.
        """
        # 3 and "3" name the same entry and share one cache key.
        key = self.cache_key("entry", type=type, id=str(id))
        envelope = decode_body(self._remember(key, f"{type}/{id}"))
        record = self._expect_entity(envelope, key, type)
        return self._rewrite_record(record, full_urls)

    def entries_by_field(
        self,
        type: str,
        field_name: str,
        field_value: Any,
        full_urls: bool = True,
        populate: Optional[str] = None,
    ) -> list[Any]:
        """Fetch the entries of *type* whose *field_name* equals *field_value*.

        Sends ``GET /<type>?<field_name>=<field_value>`` with
        ``&populate=<populate>`` appended when given. Validation, link
        rewriting and normalization follow :meth:`collection`.
        """
        key = self.cache_key(
            "entryByField",
            type=type,
            field_name=field_name,
            field_value=field_value,
            populate=populate,
        )
        pairs: list[tuple[str, Any]] = [(field_name, field_value)]
        if populate:
            pairs.append(("populate", populate))

        envelope = decode_body(self._remember(key, type, build_query(pairs)))
        items = self._expect_collection(envelope, key, type)
        return self._normalize_items(items, full_urls, populate)

    def single(
        self,
        type: str,
        pluck: Optional[str] = None,
        full_urls: bool = True,
    ) -> Any:
        """Fetch a single type (``GET /<type>``).

        Args:
            type: Single type name, e.g. ``homepage``.
            pluck: Return only this field's value when it is present and
                not null.
            full_urls: Rewrite relative markdown image links.

        Returns:
            The plucked value, or the whole mapping.

        Raises:
            PermissionDenied: The body carried a 403 status.
            NotFound: The body was null.
            UnknownError: The body had no ``id``.
        """
        key = self.cache_key("single", type=type)
        envelope = decode_body(self._remember(key, type))
        record = self._rewrite_record(self._expect_entity(envelope, key, type), full_urls)

        if pluck is not None and record.get(pluck) is not None:
            return record[pluck]
        return record

    def transform_data(self, item: Any, populate: Optional[str] = None) -> Any:
        """Normalize one entry; see :func:`strapi_cache.normalize.transform_data`."""
        return transform_data(item, populate)

    def cache_key(self, operation: str, **params: Any) -> str:
        """Return the cache key used for *operation* with *params*.

        The base URL is part of the key so that façades pointing at
        different Strapi instances can share one cache directory.
        """
        return make_cache_key(operation, {"url": self._config.url, **params})

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _remember(self, key: str, path: str, query: str = "") -> Any:
        return self._cache.remember(
            key, self._config.cache_time, lambda: self._fetch(path, query)
        )

    def _fetch(self, path: str, query: str) -> Any:
        self._client.open()
        return self._client.get_json(path, query)

    def _forget(self, key: str, envelope: Envelope) -> None:
        get_output().debug(f"Evicting {key} ({envelope.kind} body)")
        self._cache.forget(key)

    def _expect_collection(self, envelope: Envelope, key: str, type: str) -> list[Any]:
        if isinstance(envelope, CollectionEnvelope):
            return envelope.data
        self._forget(key, envelope)
        self._raise_for(envelope, type, expected="a collection")

    def _expect_entity(self, envelope: Envelope, key: str, type: str) -> dict[str, Any]:
        if isinstance(envelope, EntityEnvelope):
            return envelope.record
        self._forget(key, envelope)
        self._raise_for(envelope, type, expected="an entry with an id")

    def _raise_for(self, envelope: Envelope, type: str, expected: str) -> NoReturn:
        """Raise the exception matching a body that failed validation."""
        if isinstance(envelope, ErrorEnvelope) and envelope.is_forbidden:
            raise PermissionDenied("Strapi returned a 403 Forbidden")
        if isinstance(envelope, NullBody):
            raise NotFound(f"The requested content ({type}) was null")
        if isinstance(envelope, ErrorEnvelope):
            detail = f": {envelope.message}" if envelope.message else ""
            raise UnknownError(
                f"Strapi returned status {envelope.status_code} for {type}{detail}"
            )
        raise UnknownError(
            f"An unknown Strapi error was returned: expected {expected} for {type}, "
            f"got a {envelope.kind} body"
        )

    def _rewrite_record(self, record: Mapping[str, Any], full_urls: bool) -> dict[str, Any]:
        if full_urls:
            return rewrite_fields(record, self._config.url)
        return dict(record)

    def _normalize_items(
        self,
        items: list[Any],
        full_urls: bool,
        populate: Optional[str],
    ) -> list[Any]:
        if full_urls:
            items = [rewrite_item(item, self._config.url) for item in items]
        return [transform_data(item, populate) for item in items]
