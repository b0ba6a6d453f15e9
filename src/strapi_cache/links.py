"""Rewriting of relative markdown image links into absolute URLs.

Strapi stores rich-text fields as markdown whose uploaded images point at
paths relative to the CMS host (``![logo](/uploads/logo.png)``). A
front-end served from another origin needs them absolute, so
:func:`rewrite_links` prefixes each image path with the CMS base URL.

Everything here works on plain values and never raises; a string without
image syntax comes back unchanged.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

MARKDOWN_IMAGE = re.compile(r"!\[(.*?)\]\((.*?)\)")

_ABSOLUTE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)")


def rewrite_links(value: str, base_url: str) -> str:
    """Prefix every markdown image path in *value* with *base_url*.

    Paths that are already absolute (``https://...``, ``data:...``,
    ``//cdn...``) are left as they are. Exactly one ``/`` separates the
    base URL from the path.

    Example::

        >>> rewrite_links("see ![alt](/img/a.png)", "https://cdn.example.com")
        'see ![alt](https://cdn.example.com/img/a.png)'
    """
    base = base_url.rstrip("/")

    def _replace(match: re.Match[str]) -> str:
        text, path = match.group(1), match.group(2)
        if not path or _ABSOLUTE.match(path):
            return match.group(0)
        return f"![{text}]({base}/{path.lstrip('/')})"

    return MARKDOWN_IMAGE.sub(_replace, value)


def rewrite_fields(fields: Mapping[str, Any], base_url: str) -> dict[str, Any]:
    """Return a copy of *fields* with links rewritten in its string values.

    Only top-level values are touched; nested mappings and lists are
    copied by reference.
    """
    return {
        key: rewrite_links(value, base_url) if isinstance(value, str) else value
        for key, value in fields.items()
    }


def rewrite_item(item: Any, base_url: str) -> Any:
    """Rewrite links in one collection item.

    The item's own string fields are rewritten, and so are the string
    fields of its ``attributes`` mapping when it has one, since those
    become the item's top-level fields once normalized. Non-mapping items
    are returned unchanged.
    """
    if not isinstance(item, Mapping):
        return item
    rewritten = rewrite_fields(item, base_url)
    attributes = rewritten.get("attributes")
    if isinstance(attributes, Mapping):
        rewritten["attributes"] = rewrite_fields(attributes, base_url)
    return rewritten
