"""Typer application and CLI entry point for strapi-cache.

This module wires together the top-level Typer application: the root
callback that installs the :class:`~strapi_cache.output.OutputManager`
and records the connection options, the content commands from
:mod:`strapi_cache.commands.content`, and the ``cache`` / ``config``
sub-groups.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from strapi_cache import __version__
from strapi_cache.commands.cache import cache_app
from strapi_cache.commands.config import config_app
from strapi_cache.commands.content import (
    by_field_command,
    collection_command,
    count_command,
    entry_command,
    single_command,
)
from strapi_cache.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="strapi-cache",
    help="Query a Strapi content API with response caching.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("collection")(collection_command)
app.command("count")(count_command)
app.command("entry")(entry_command)
app.command("by-field")(by_field_command)
app.command("single")(single_command)
app.add_typer(cache_app, name="cache", help="Response cache management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"strapi-cache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help="Strapi base URL (overrides STRAPI_URL)."
    ),
    cache_time: Optional[int] = typer.Option(
        None, "--cache-time", min=0, help="Cache TTL in seconds."
    ),
    token_source: Optional[str] = typer.Option(
        None, "--token-source", help="API token source: env:VAR or file:/path."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Bypass the response cache."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~strapi_cache.output.OutputManager` from
    CLI flags, falling back to the configured ``output.format``, and
    stores the connection options in ``ctx.obj`` for the content commands.
    """
    from strapi_cache.config import resolve_output_format
    from strapi_cache.exceptions import StrapiError
    from strapi_cache.output import OutputFormat, OutputManager, set_output

    cli_format = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    config_problem = None
    try:
        fmt = resolve_output_format(cli_format)
    except StrapiError as exc:
        fmt, config_problem = OutputFormat.AUTO.value, exc

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    if config_problem is not None:
        output.warning(f"{config_problem}; using automatic output format")

    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["cache_time"] = cache_time
    ctx.obj["token_source"] = token_source
    ctx.obj["no_cache"] = no_cache
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from strapi_cache.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``strapi-cache`` console script.

    :class:`~strapi_cache.exceptions.StrapiError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from strapi_cache.exceptions import StrapiError
        from strapi_cache.output import error

        if isinstance(exc, StrapiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
