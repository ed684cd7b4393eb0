"""Built-in CLI sub-commands for runway.

* :mod:`~runway.commands.guide` -- ``guide`` and ``show``: build, export,
  save and redisplay quick-start guides.
* :mod:`~runway.commands.inspect` -- ``endpoints``, ``auth`` and ``info``:
  read-only views of a spec.
* :mod:`~runway.commands.config` -- view and modify global settings.

Single commands are plain callback functions registered directly on the
root app; the ``config`` group is a :class:`typer.Typer` sub-application.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from runway.exceptions import RunwayError
from runway.models import GlobalConfig
from runway.output import error


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`~runway.exceptions.RunwayError` and exit with its code."""
    try:
        yield
    except RunwayError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def current_config(ctx: typer.Context) -> GlobalConfig:
    """The config resolved by the root callback, or a freshly resolved one."""
    from runway.config import resolve_config

    if isinstance(ctx.obj, dict) and ctx.obj.get("config") is not None:
        return ctx.obj["config"]
    return resolve_config()
