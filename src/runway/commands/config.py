"""Config commands -- view and modify global configuration.

Provides the ``runway config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~runway.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from runway.exceptions import ConfigError
from runway.exit_codes import EXIT_INVALID_USAGE
from runway.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored global configuration.

    Example::

        runway config show
        runway --json config show
    """
    from runway.config import get_config_dir, load_global_config

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'snippets.default_format')."
    ),
    value: str = typer.Argument(help="Value to set (JSON literals like 'true' or '5' allowed)."),
) -> None:
    """Set a configuration value.

    Example::

        runway config set snippets.default_format python
        runway config set snippets.alternatives_limit 6
        runway config set store.ttl_seconds null
    """
    from runway.config import load_global_config, save_global_config, set_config_value

    try:
        config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        runway config reset --force
    """
    from runway.config import reset_global_config

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    reset_global_config()
    success("Configuration reset to defaults.")
