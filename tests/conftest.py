"""Shared test fixtures for runway.

Provides reusable fixtures for loading spec fixtures, building normalized
specs, creating isolated config environments, managing output state, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from runway.models import NormalizedSpec
from runway.output import reset_output
from runway.parser import normalize_spec, parse_spec, resolve_refs


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


def _load_fixture(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Raw OpenAPI 3.0 petstore document (bearer default, API key on DELETE)."""
    return _load_fixture("petstore_3.0.json")


@pytest.fixture
def swagger_20_raw() -> dict[str, Any]:
    """Raw Swagger 2.0 document with host/basePath and a query API key."""
    return _load_fixture("swagger_2.0.json")


@pytest.fixture
def complex_auth_raw() -> dict[str, Any]:
    """Raw OpenAPI 3.1 document exercising every security scheme type."""
    return _load_fixture("complex_auth.json")


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore_3.0.json"


@pytest.fixture
def events_yaml_path() -> Path:
    return FIXTURES_DIR / "events_dates.yaml"


# ---------------------------------------------------------------------------
# Normalized spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_spec(petstore_30_raw: dict[str, Any]) -> NormalizedSpec:
    return normalize_spec(resolve_refs(petstore_30_raw))


@pytest.fixture
def swagger_spec(swagger_20_raw: dict[str, Any]) -> NormalizedSpec:
    return normalize_spec(resolve_refs(swagger_20_raw))


@pytest.fixture
def complex_auth_spec(complex_auth_raw: dict[str, Any]) -> NormalizedSpec:
    return normalize_spec(resolve_refs(complex_auth_raw))


@pytest.fixture
def events_spec(events_yaml_path: Path) -> NormalizedSpec:
    return parse_spec(str(events_yaml_path))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all RUNWAY_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("runway.config._is_xdg_platform", lambda: True)

    for var in ["RUNWAY_FORMAT", "RUNWAY_STORE_DIR", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
