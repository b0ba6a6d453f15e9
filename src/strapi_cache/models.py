"""Pydantic configuration models shared across strapi-cache.

:class:`StrapiConfig` is the explicit configuration handed to
:class:`~strapi_cache.strapi.Strapi` at construction. :class:`GlobalConfig`
is the shape persisted in the user's config directory and in the
project-local ``strapi.json``; :func:`~strapi_cache.config.resolve_config`
layers it with environment variables and CLI flags to produce the final
``StrapiConfig``.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_CACHE_TIME = 3600


class RequestConfig(BaseModel):
    """HTTP settings applied to every request sent to Strapi."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """Response cache settings."""

    enabled: bool = Field(default=True, description="Enable response caching")
    directory: Optional[str] = Field(
        default=None,
        description="Cache directory (defaults to the XDG cache directory)",
    )


class OutputConfig(BaseModel):
    """Default output format preferences for the CLI."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format used when neither --json nor --plain is given"
    )


class StrapiConfig(BaseModel):
    """Effective configuration consumed by the query façade.

    Example::

        StrapiConfig(url="https://cms.example.com/api", cache_time=600)
    """

    url: str = Field(description="Base URL of the Strapi content API")
    cache_time: int = Field(
        default=DEFAULT_CACHE_TIME, ge=0, description="Cache TTL in seconds"
    )
    token_source: Optional[str] = Field(
        default=None,
        description="API token source: env:VAR or file:/path",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("url must not be empty")
        return value


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/strapi-cache/config.json``.

    Every field is optional on disk so that a project file or environment
    variables can supply the rest. See
    :func:`~strapi_cache.config.resolve_config` for the precedence chain.
    """

    url: Optional[str] = None
    cache_time: int = Field(default=DEFAULT_CACHE_TIME, ge=0)
    token_source: Optional[str] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
