"""Cache commands -- inspect and clear the response cache.

The cache directory comes from ``cache.directory`` in the project or
global config, falling back to the XDG cache directory. Neither command
needs a Strapi URL.
"""

from __future__ import annotations

from pathlib import Path

import typer

from strapi_cache.cache import ResponseCache
from strapi_cache.config import get_cache_dir, load_global_config, load_project_config
from strapi_cache.exceptions import StrapiError
from strapi_cache.models import CacheConfig
from strapi_cache.output import error, print_table, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache() -> ResponseCache:
    try:
        directory = load_global_config().cache.directory
        project = load_project_config() or {}
    except StrapiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    project_cache = project.get("cache")
    if isinstance(project_cache, dict) and project_cache.get("directory"):
        directory = project_cache["directory"]
    cache_dir = Path(directory) if directory else get_cache_dir()
    return ResponseCache(cache_dir, CacheConfig(enabled=True))


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the cache location, entry count and size on disk."""
    cache = _open_cache()
    try:
        stats = cache.stats()
    finally:
        cache.close()
    print_table(
        ["key", "value"],
        [[key, str(value)] for key, value in stats.items()],
        title="Response cache",
    )


@cache_app.command("clear")
def cache_clear() -> None:
    """Remove every cached response."""
    cache = _open_cache()
    try:
        removed = cache.clear()
    finally:
        cache.close()
    success(f"Removed {removed} cached response(s).")
