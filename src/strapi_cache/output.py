"""Output and diagnostics with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (normalized entries, counts, tables).
* **stderr** -- diagnostics (status, warnings, errors, debug lines from the
  cache and HTTP client).
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.

Library code (the façade, the cache, the client) only ever calls
:func:`debug`, which is silent unless verbose mode was switched on, so
embedding :class:`~strapi_cache.strapi.Strapi` in an application prints
nothing by default.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Iterator, Optional, Union

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` resolves to ``RICH`` on an interactive, colour-capable
    terminal and to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Renders command results to stdout and diagnostics to stderr.

    Args:
        format: Output format, as an :class:`OutputFormat` or its string value.
        no_color: Disable colour and styling.
        quiet: Drop ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages.
        output_file: Write data to this file instead of stdout.
    """

    def __init__(
        self,
        format: Union[OutputFormat, str] = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file

        fmt = OutputFormat(format)
        if fmt is OutputFormat.AUTO:
            fmt = OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
        self._format = fmt

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=fmt is OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data (stdout or the output file)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render an operation result: an entry, a list of entries or a scalar.

        With an output file the file is overwritten with the JSON (or, for
        scalars, the plain text) form of *data* whatever the format.
        """
        if self._output_file:
            text = _dumps(data) if isinstance(data, (dict, list)) else str(data)
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(text if text.endswith("\n") else text + "\n")
            return

        if self._format is OutputFormat.JSON:
            self._emit(_dumps(data))
        elif self._format is OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self._emit(line)
        elif isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_dumps(data), "json", word_wrap=True))
        else:
            self._stdout.print(str(data), markup=False, highlight=False)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as JSON objects, tab-separated lines or a Rich table."""
        if self._format is OutputFormat.JSON:
            self._emit(_dumps([dict(zip(headers, row)) for row in rows]))
        elif self._format is OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self._emit("\t".join(row))
        else:
            table = Table(*headers, title=title)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def _emit(self, line: str) -> None:
        if self._output_file:
            with open(self._output_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        else:
            print(line, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._notify(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._notify(message, style="green")

    def suggest(self, message: str) -> None:
        """Print a next-step hint such as the flag that fixes an error."""
        if not self._quiet:
            self._notify(message, label="→ ", style="dim")

    def warning(self, message: str) -> None:
        self._notify(message, label="Warning: ", style="yellow")

    def error(self, message: str) -> None:
        self._notify(message, label="Error: ", style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._notify(message, label="[debug] ", style="dim")

    def _notify(self, message: str, label: str = "", style: str = "") -> None:
        # Text is never parsed as markup, so "filters[slug]" prints as is.
        if self._no_color:
            print(f"{label}{message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(Text(f"{label}{message}", style=style))


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _plain_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _plain_lines(data: Any) -> Iterator[str]:
    """A mapping becomes ``key<TAB>value`` lines, a list one line per item."""
    if isinstance(data, dict):
        for key, value in data.items():
            yield f"{key}\t{_plain_value(value)}"
    elif isinstance(data, list):
        for item in data:
            if isinstance(item, dict):
                yield "\t".join(_plain_value(v) for v in item.values())
            else:
                yield _plain_value(item)
    else:
        yield _plain_value(data)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when NO_COLOR is set (to any value) or TERM=dumb."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance, installed by the CLI root callback
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global instance; tests call this between runs."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
