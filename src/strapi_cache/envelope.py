"""Tagged-variant decoding of raw Strapi response bodies.

Every body the façade receives (fresh or from the cache) is classified
into exactly one variant before any operation looks at it:

* :class:`ErrorEnvelope` -- ``{"statusCode": 403, ...}`` (legacy) or
  ``{"data": null, "error": {"status": 403, ...}}`` (current Strapi).
* :class:`CollectionEnvelope` -- ``{"data": [...], "meta": {...}}`` or a
  bare JSON array.
* :class:`EntityEnvelope` -- a mapping carrying a non-null ``id``.
* :class:`NullBody` -- literal ``null`` (or an empty response).
* :class:`Unrecognized` -- anything else.

Operations dispatch on the variant with ``isinstance`` instead of probing
for individual keys.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    kind: Literal["error"] = "error"
    status_code: int
    message: Optional[str] = None
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403


class CollectionEnvelope(BaseModel):
    kind: Literal["collection"] = "collection"
    data: list[Any] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


class EntityEnvelope(BaseModel):
    kind: Literal["entity"] = "entity"
    record: dict[str, Any]


class NullBody(BaseModel):
    kind: Literal["null"] = "null"


class Unrecognized(BaseModel):
    kind: Literal["unrecognized"] = "unrecognized"
    body: Any = None


Envelope = Union[ErrorEnvelope, CollectionEnvelope, EntityEnvelope, NullBody, Unrecognized]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _error_message(body: dict[str, Any]) -> Optional[str]:
    """Pick the most specific message Strapi put in an error body."""
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    for key in ("message", "error"):
        value = body.get(key)
        if isinstance(value, str):
            return value
    return None


def decode_body(body: Any) -> Envelope:
    """Classify a raw decoded body into one of the envelope variants.

    Precedence for mappings: a top-level ``statusCode`` wins, then a
    ``data`` list, then a non-null ``id``, then a nested ``error.status``.
    An entity that merely has an attribute called ``error`` is therefore
    still an entity.

    Args:
        body: Decoded JSON (or raw text) as returned by the HTTP client.

    Returns:
        The matching variant instance.
    """
    if body is None:
        return NullBody()

    if isinstance(body, list):
        return CollectionEnvelope(data=body)

    if not isinstance(body, dict):
        return Unrecognized(body=body)

    if _is_int(body.get("statusCode")):
        return ErrorEnvelope(
            status_code=body["statusCode"],
            message=_error_message(body),
            body=body,
        )

    if isinstance(body.get("data"), list):
        meta = body.get("meta")
        return CollectionEnvelope(
            data=body["data"],
            meta=meta if isinstance(meta, dict) else {},
        )

    if body.get("id") is not None:
        return EntityEnvelope(record=body)

    error = body.get("error")
    if isinstance(error, dict) and _is_int(error.get("status")):
        return ErrorEnvelope(
            status_code=error["status"],
            message=_error_message(body),
            body=body,
        )

    return Unrecognized(body=body)
