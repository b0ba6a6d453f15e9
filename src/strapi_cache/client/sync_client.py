"""Synchronous HTTP client for the Strapi content API.

This module provides :class:`SyncClient`, a thin blocking wrapper around
:class:`httpx.Client` that:

- targets the configured base URL with the configured timeout and TLS
  verification,
- injects ``Authorization: Bearer <token>`` when an API token source is
  configured,
- sends pre-assembled query strings untouched so the wire format matches
  what Strapi expects byte for byte (see :func:`build_query`),
- maps network failures to :class:`~strapi_cache.exceptions.ConnectionError_`.

There is no retry loop and no cache here; both concerns belong to the
façade, which evicts and re-raises instead of retrying.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx

from strapi_cache.client.response import extract_response_data
from strapi_cache.config import resolve_credential
from strapi_cache.exceptions import ConnectionError_
from strapi_cache.models import StrapiConfig
from strapi_cache.output import get_output

# Characters Strapi query syntax relies on: ``_sort=title:ASC``,
# ``populate=a,b``, ``filters[slug][$eq]=x``, ``populate=author.avatar``.
_QUERY_SAFE = ":,[]$/"


def build_query(pairs: Sequence[tuple[str, Any]]) -> str:
    """Join ``(name, value)`` pairs into a query string, preserving order.

    Booleans become ``true`` / ``false``, other values go through ``str``.
    Strapi's structural characters are kept literal; everything else that
    is not URL-safe is percent-encoded.

    Example::

        >>> build_query([("_sort", "id:DESC"), ("_limit", 20)])
        '_sort=id:DESC&_limit=20'
    """
    return "&".join(
        f"{quote(str(name), safe=_QUERY_SAFE)}={quote(_query_value(value), safe=_QUERY_SAFE)}"
        for name, value in pairs
    )


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SyncClient:
    """Synchronous HTTP client for Strapi GET requests.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Effective configuration (base URL, request settings,
            token source).
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with SyncClient(config) as client:
            body = client.get_json("articles", "_sort=id:DESC&_limit=20&_start=0")
    """

    def __init__(
        self,
        config: StrapiConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def open(self) -> None:
        """Create the underlying :class:`httpx.Client` if it is not open yet."""
        if self._client is not None:
            return
        request = self._config.request
        self._client = httpx.Client(
            base_url=self._config.url,
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            headers=self._default_headers(),
            transport=self._transport,
        )

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def get_json(self, path: str, query: str = "") -> Any:
        """Send ``GET <base-url>/<path>?<query>`` and return the decoded body.

        Args:
            path: Path below the base URL, without a leading slash
                (``articles``, ``articles/count``, ``articles/3``).
            query: Pre-assembled query string without the ``?``.

        Returns:
            The decoded body, see
            :func:`~strapi_cache.client.response.extract_response_data`.

        Raises:
            ConnectionError_: On network / timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        url = f"/{path.lstrip('/')}"
        if query:
            url = f"{url}?{query}"

        get_output().debug(f"GET {self._config.url}{url}")
        try:
            response = self._client.get(url)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Request to {self._config.url}{url} failed: {exc}") from exc

        get_output().debug(f"HTTP {response.status_code} {response.reason_phrase or ''}")
        return extract_response_data(response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _default_headers(self) -> dict[str, str]:
        """Build headers sent with every request."""
        headers = {"Accept": "application/json"}
        if self._config.token_source:
            token = resolve_credential(self._config.token_source)
            headers["Authorization"] = f"Bearer {token}"
        return headers
