"""Deterministic cache key construction.

Keys have the form ``strapi-cache.<operation>.<digest>`` where the digest
is a SHA-256 over the operation's full parameter set serialised as
sorted-key JSON. Two calls share an entry only when every parameter is
equal, so ``limit=20`` and ``limit="20"`` or ``populate=None`` and
``populate="None"`` never collide.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping

CACHE_KEY = "strapi-cache"


def make_cache_key(operation: str, params: Mapping[str, Any]) -> str:
    """Build the cache key for *operation* called with *params*.

    Args:
        operation: Façade operation name (``collection``, ``entry``, ...).
        params: Every parameter that influences the outbound request.

    Returns:
        A flat string key under the :data:`CACHE_KEY` prefix.
    """
    raw = json.dumps(dict(params), sort_keys=True, default=str)
    digest = hashlib.sha256(raw.encode()).hexdigest()
    return f"{CACHE_KEY}.{operation}.{digest}"
