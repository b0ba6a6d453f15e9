"""Body extraction for Strapi responses.

Strapi reports most failures inside a JSON body rather than through the
HTTP status alone (``{"statusCode": 403, ...}``), so the client never
raises on a 4xx/5xx status. It hands the decoded body to the façade,
which classifies it with :func:`~strapi_cache.envelope.decode_body`.
"""

from __future__ import annotations

from typing import Any

import httpx


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. an HTML
    error page from a proxy), returns the raw text. Returns ``None`` for
    responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, ``int``, ``None``, ...),
        a ``str`` of raw text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        pass

    return response.text
