"""Content commands -- run the façade's read operations from the shell.

Each command resolves the effective configuration from the global
options (``--url``, ``--cache-time``, ``--token-source``, ``--no-cache``),
opens a :class:`~strapi_cache.strapi.Strapi` façade, runs one operation
and renders the result through :func:`~strapi_cache.output.format_response`.
Façade errors become exit codes from :mod:`strapi_cache.exit_codes`.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import typer

from strapi_cache.config import resolve_config
from strapi_cache.exceptions import ConfigError, InvalidUsageError, StrapiError
from strapi_cache.output import debug, error, format_response, suggest
from strapi_cache.strapi import Strapi


def open_strapi(ctx: typer.Context) -> Strapi:
    """Build a façade from the root options stored in ``ctx.obj``.

    Raises:
        typer.Exit: With the :class:`~strapi_cache.exceptions.ConfigError`
            exit code when no usable configuration can be resolved.
    """
    obj = ctx.obj or {}
    try:
        _, config = resolve_config(
            cli_url=obj.get("url"),
            cli_cache_time=obj.get("cache_time"),
            cli_token_source=obj.get("token_source"),
        )
    except ConfigError as exc:
        error(str(exc))
        suggest(
            "Check the settings with 'strapi-cache config show'; "
            "save a base URL with 'strapi-cache config set url <base-url>'."
        )
        raise typer.Exit(code=exc.exit_code) from None

    if obj.get("no_cache"):
        config = config.model_copy(
            update={"cache": config.cache.model_copy(update={"enabled": False})}
        )
    debug(f"Strapi URL: {config.url} (cache_time={config.cache_time}s)")
    return Strapi(config, transport=obj.get("transport"))


def _sort_order(value: str) -> str:
    order = value.upper()
    if order not in ("ASC", "DESC"):
        raise InvalidUsageError(f"Invalid sort order: {value} (expected ASC or DESC)")
    return order


def _run(ctx: typer.Context, operation: Callable[[Strapi], Any]) -> None:
    """Run *operation* against a fresh façade and print its result."""
    try:
        with open_strapi(ctx) as strapi:
            result = operation(strapi)
    except StrapiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(result)


def collection_command(
    ctx: typer.Context,
    type: str = typer.Argument(help="Collection type, e.g. 'articles'."),
    sort_key: str = typer.Option("id", "--sort-key", "-s", help="Field to sort on."),
    sort_order: str = typer.Option("DESC", "--sort-order", help="ASC or DESC."),
    limit: int = typer.Option(20, "--limit", "-l", help="Page size."),
    start: int = typer.Option(0, "--start", help="Offset of the first entry."),
    populate: Optional[str] = typer.Option(
        None, "--populate", "-P", help="Comma-separated relations to inline."
    ),
    full_urls: bool = typer.Option(
        True, "--full-urls/--no-full-urls", help="Rewrite relative image links."
    ),
) -> None:
    """List entries of a collection type.

    Example::

        strapi-cache collection articles --sort-key publishedAt --sort-order ASC -P author
    """
    _run(
        ctx,
        lambda strapi: strapi.collection(
            type, sort_key, _sort_order(sort_order), limit, start, full_urls, populate
        ),
    )


def count_command(
    ctx: typer.Context,
    type: str = typer.Argument(help="Collection type, e.g. 'articles'."),
) -> None:
    """Print the number of entries in a collection type."""
    _run(ctx, lambda strapi: strapi.collection_count(type))


def entry_command(
    ctx: typer.Context,
    type: str = typer.Argument(help="Collection type, e.g. 'articles'."),
    id: str = typer.Argument(help="Entry id."),
    full_urls: bool = typer.Option(
        True, "--full-urls/--no-full-urls", help="Rewrite relative image links."
    ),
) -> None:
    """Show one entry of a collection type."""
    _run(ctx, lambda strapi: strapi.entry(type, id, full_urls))


def by_field_command(
    ctx: typer.Context,
    type: str = typer.Argument(help="Collection type, e.g. 'articles'."),
    field_name: str = typer.Argument(help="Field to filter on."),
    field_value: str = typer.Argument(help="Value the field must equal."),
    populate: Optional[str] = typer.Option(
        None, "--populate", "-P", help="Comma-separated relations to inline."
    ),
    full_urls: bool = typer.Option(
        True, "--full-urls/--no-full-urls", help="Rewrite relative image links."
    ),
) -> None:
    """List entries whose field equals a value.

    Example::

        strapi-cache by-field articles slug hello-world -P author,tags
    """
    _run(
        ctx,
        lambda strapi: strapi.entries_by_field(
            type, field_name, field_value, full_urls, populate
        ),
    )


def single_command(
    ctx: typer.Context,
    type: str = typer.Argument(help="Single type, e.g. 'homepage'."),
    pluck: Optional[str] = typer.Option(
        None, "--pluck", help="Print only this field."
    ),
    full_urls: bool = typer.Option(
        True, "--full-urls/--no-full-urls", help="Rewrite relative image links."
    ),
) -> None:
    """Show a single type, or one of its fields."""
    _run(ctx, lambda strapi: strapi.single(type, pluck, full_urls))
