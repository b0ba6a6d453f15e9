"""Flattening of Strapi's ``{id, attributes}`` entry envelope.

Strapi v4 wraps every entry as ``{"id": 1, "attributes": {...}}`` and
every populated relation as ``{"data": {...}}`` or ``{"data": [...]}``.
:func:`transform_data` turns an entry into a flat mapping and expands the
relations the caller asked to populate. Relations that were not requested
keep their raw shape.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


def populate_keys(populate: Optional[str]) -> list[str]:
    """Split a comma-separated population spec into relation names.

    ``None`` and the empty string yield no names.
    """
    if not populate:
        return []
    return [key.strip() for key in populate.split(",") if key.strip()]


def transform_data(item: Any, populate: Optional[str] = None) -> Any:
    """Normalize one entry.

    Items that are not mappings with a non-null ``id`` *and* a non-null
    mapping ``attributes`` are returned unchanged, so already-flat data
    passes through. Otherwise the result is ``attributes`` with ``id``
    merged in. Each relation named in *populate* that is present and
    non-null is replaced by its normalized form: its ``data`` sub-field
    when that is set, else the relation value itself. Relations are
    normalized without a population spec of their own; a list of related
    entries is normalized element by element.

    Example::

        >>> transform_data(
        ...     {"id": 1, "attributes": {"title": "x",
        ...      "author": {"data": {"id": 2, "attributes": {"name": "y"}}}}},
        ...     populate="author",
        ... )
        {'title': 'x', 'author': {'name': 'y', 'id': 2}, 'id': 1}
    """
    if not isinstance(item, Mapping):
        return item
    attributes = item.get("attributes")
    if item.get("id") is None or not isinstance(attributes, Mapping):
        return item

    result = dict(attributes)
    result["id"] = item["id"]

    for key in populate_keys(populate):
        relation = result.get(key)
        if relation is None:
            continue
        result[key] = _transform_relation(relation)

    return result


def _transform_relation(relation: Any) -> Any:
    target = relation
    if isinstance(relation, Mapping) and relation.get("data") is not None:
        target = relation["data"]
    if isinstance(target, list):
        return [transform_data(element) for element in target]
    return transform_data(target)
