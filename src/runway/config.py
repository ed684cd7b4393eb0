"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for runway:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.runway/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir` and :func:`get_store_dir`.
* **Global config** -- A single :class:`~runway.models.GlobalConfig`
  JSON file storing defaults (output format, snippet and store settings).
* **Dotted keys** -- :func:`set_config_value` updates one setting such as
  ``snippets.default_format`` with validation.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes go through :func:`_atomic_write` (temp file, then rename).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from runway.exceptions import ConfigError
from runway.models import GlobalConfig

_APP_NAME = "runway"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "runway.json"

ENV_FORMAT = "RUNWAY_FORMAT"
ENV_STORE_DIR = "RUNWAY_STORE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/runway/`` (default ``~/.config/runway/``).
    On macOS/Windows: ``~/.runway/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (stored guides, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/runway/`` (default ``~/.local/share/runway/``).
    On macOS/Windows: ``~/.runway/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_store_dir(config: Optional[GlobalConfig] = None) -> Path:
    """Return the guide store directory.

    ``store.directory`` from *config* wins (it already reflects
    ``RUNWAY_STORE_DIR`` after :func:`resolve_config`); otherwise the data
    directory is used.
    """
    if config is not None and config.store.directory:
        path = Path(config.store.directory).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    return get_data_dir()


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On failure the temp
    file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The stored :class:`~runway.models.GlobalConfig`, or defaults when
        the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def reset_global_config() -> GlobalConfig:
    """Overwrite the global config with defaults and return them."""
    config = GlobalConfig()
    save_global_config(config)
    return config


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    *value* is parsed as JSON when possible (so ``true``, ``3`` and ``null``
    get their JSON types) and used as a plain string otherwise.

    Raises:
        ConfigError: If *key* does not name a setting or *value* fails
            validation.

    Example::

        >>> set_config_value(GlobalConfig(), "snippets.alternatives_limit", "6").snippets.alternatives_limit
        6
    """
    parts = key.split(".")
    data = config.model_dump()

    node: Any = data
    for part in parts[:-1]:
        if not isinstance(node, dict) or part not in node or not isinstance(node[part], dict):
            raise ConfigError(f"Unknown config key '{key}'")
        node = node[part]
    if not isinstance(node, dict) or parts[-1] not in node or isinstance(node[parts[-1]], dict):
        raise ConfigError(f"Unknown config key '{key}'")

    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    node[parts[-1]] = parsed

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {value!r}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./runway.json``.

    The file holds a partial :class:`~runway.models.GlobalConfig`, e.g.
    ``{"snippets": {"default_format": "python"}}``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(cli_format: Optional[str] = None) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``)
        2. Environment variables (``RUNWAY_FORMAT``, ``RUNWAY_STORE_DIR``)
        3. Project config (``./runway.json``)
        4. User config (``~/.config/runway/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a config file is invalid.
    """
    # 5 + 4
    config = load_global_config()

    # 3
    project = load_project_config()
    if project is not None:
        try:
            config = GlobalConfig.model_validate(
                _deep_merge(config.model_dump(), project)
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    # 2
    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        config.output.format = env_format
    env_store_dir = os.environ.get(ENV_STORE_DIR)
    if env_store_dir:
        config.store.directory = env_store_dir

    # 1
    if cli_format is not None:
        config.output.format = cli_format

    return config
