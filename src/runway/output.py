"""Terminal output for runway with strict stdout/stderr discipline.

Anything a user might pipe or save goes to **stdout**: the guide itself,
code snippets, endpoint tables, ``--json`` documents. Status lines, errors
and next-step hints go to **stderr** so they never end up inside a saved
guide or a ``jq`` pipeline.

Presentation follows the resolved :class:`OutputFormat`. Rich styling and
syntax highlighting are only used when stdout is an interactive terminal;
``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all turn colour off.

Commands do not hold an :class:`OutputManager` themselves. The root
callback installs one with :func:`set_output` and the module-level helpers
(:func:`print_code`, :func:`info`, :func:`error`, ...) forward to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is presented.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal
    and ``PLAIN`` everywhere else.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Requested output format; ``AUTO`` is resolved on creation.
        no_color: Disable colour and Rich markup on both streams.
        quiet: Drop informational stderr lines (errors are always shown).
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format (never ``AUTO``)."""
        return self._format

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Write a structured value (dict, list or string) to stdout.

        Args:
            data: The value to render. Strings holding JSON are re-parsed
                in ``JSON`` mode so they come out pretty-printed.
        """
        if self._format == OutputFormat.JSON:
            self._print_json(data)
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data)

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unchanged, followed by a newline.

        Args:
            text: The text to write.
        """
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a table to stdout.

        ``JSON`` mode emits a list of objects keyed by header, ``PLAIN``
        emits tab-separated lines starting with the header row, and
        ``RICH`` draws a :class:`~rich.table.Table`.

        Args:
            headers: Column names.
            rows: Cell values, one list per row.
            title: Table caption, shown in ``RICH`` mode only.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def print_heading(self, text: str) -> None:
        """Write a section heading to stdout.

        Args:
            text: Heading text; drawn as a rule in ``RICH`` mode.
        """
        if self._format == OutputFormat.RICH:
            self._stdout.rule(f"[bold]{text}[/bold]", align="left")
        else:
            self.print_data(text)

    def print_code(self, code: str, language: str) -> None:
        """Write a code snippet to stdout.

        Args:
            code: Snippet source. Printed verbatim outside ``RICH`` mode so
                it can be copied or piped into a shell.
            language: Lexer name used for highlighting (``bash``,
                ``javascript``, ``python``).
        """
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(code, language, theme="monokai", word_wrap=True))
        else:
            self.print_data(code)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Write a status line to stderr unless quiet.

        Args:
            message: The status text.
        """
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        """Write a green confirmation to stderr unless quiet.

        Args:
            message: The confirmation text.
        """
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Write an ``Error:`` line to stderr, even when quiet.

        Args:
            message: The error text.
        """
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Write an arrow-prefixed next step to stderr unless quiet.

        Args:
            message: The suggested action, usually a command to run.
        """
        if not self._quiet:
            line = f"→ {message}"
            self._diagnostic(line, f"[dim]{line}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)

    def _print_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, TypeError):
                self.print_data(data)
                return
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            lines = [f"{key}\t{_plain_cell(value)}" for key, value in data.items()]
        elif isinstance(data, list):
            lines = [
                "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
                for item in data
            ]
        else:
            lines = [str(data)]
        for line in lines:
            self.print_data(line)

    def _print_rich(self, data: Any) -> None:
        if isinstance(data, (dict, list)):
            rendered = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data))


# ------------------------------------------------------------------ #
# Formatting and terminal detection
# ------------------------------------------------------------------ #


def _plain_cell(value: Any) -> str:
    # nested values stay on one line so each key keeps a single row
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* for the module-level helpers."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next call builds a fresh one."""
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def format_response(data: Any) -> None:
    """Forward to :meth:`OutputManager.format_response`."""
    get_output().format_response(data)


def print_data(text: str) -> None:
    """Forward to :meth:`OutputManager.print_data`."""
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    """Forward to :meth:`OutputManager.print_table`."""
    get_output().print_table(headers, rows, title)


def print_heading(text: str) -> None:
    """Forward to :meth:`OutputManager.print_heading`."""
    get_output().print_heading(text)


def print_code(code: str, language: str) -> None:
    """Forward to :meth:`OutputManager.print_code`."""
    get_output().print_code(code, language)


def info(message: str) -> None:
    """Forward to :meth:`OutputManager.info`."""
    get_output().info(message)


def success(message: str) -> None:
    """Forward to :meth:`OutputManager.success`."""
    get_output().success(message)


def error(message: str) -> None:
    """Forward to :meth:`OutputManager.error`."""
    get_output().error(message)


def suggest(message: str) -> None:
    """Forward to :meth:`OutputManager.suggest`."""
    get_output().suggest(message)
