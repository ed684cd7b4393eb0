"""Typer application and CLI entry point for runway.

This module wires together the top-level Typer application and registers
the built-in commands (``guide``, ``show``, ``endpoints``, ``auth``,
``info`` and the ``config`` group).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`runway.config`: Configuration resolution.
    :mod:`runway.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from runway import __version__
from runway.commands.config import config_app
from runway.commands.guide import guide_command, show_command
from runway.commands.inspect import auth_command, endpoints_command, info_command
from runway.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


app = typer.Typer(
    name="runway",
    help="Turn an OpenAPI/Swagger spec into a quick-start guide.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("guide")(guide_command)
app.command("show")(show_command)
app.command("endpoints")(endpoints_command)
app.command("auth")(auth_command)
app.command("info")(info_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"runway {__version__}")
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
) -> None:
    """Root callback executed before every sub-command.

    Resolves the effective configuration, configures logging, installs the
    global :class:`~runway.output.OutputManager` and stores the resolved
    config in ``ctx.obj`` for sub-commands.
    """
    from runway.config import resolve_config
    from runway.exceptions import ConfigError
    from runway.output import OutputFormat, OutputManager, error, set_output

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    cli_format = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        choices = ", ".join(f.value for f in OutputFormat)
        error(f"Invalid output format {config.output.format!r} (expected one of: {choices})")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from runway.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``runway`` console script.

    Unhandled :class:`~runway.exceptions.RunwayError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

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
        from runway.exceptions import RunwayError
        from runway.output import error

        if isinstance(exc, RunwayError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
