"""Load OpenAPI/Swagger documents from a URL, raw JSON text, a local file, or stdin.

This module handles all I/O for fetching raw documents and converting them
into Python dictionaries. URL, file and stdin content may be JSON or YAML
(format detected automatically); text passed inline must be JSON.

The public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`load_document` -- :func:`load_spec` followed by ``$ref``
  resolution; this is what the normalizer consumes.
* :func:`spec_version` -- Report the ``openapi``/``swagger`` version string.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from runway.exceptions import MalformedSpecError
from runway.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)


def load_spec(source: str) -> dict[str, Any]:
    """Load a spec from URL, raw JSON text, file path, or stdin ('-').

    Args:
        source: A URL (http/https), a JSON document, a file path, or '-'
            for stdin.

    Returns:
        The parsed document as a dictionary (``$ref`` pointers untouched).

    Raises:
        MalformedSpecError: If the source cannot be loaded or parsed.
    """
    stripped = source.strip()
    if stripped == "-":
        return _load_from_stdin()
    if stripped.startswith(("http://", "https://")):
        return _load_from_url(stripped)
    if stripped.startswith("{"):
        return _load_from_text(stripped)
    return _load_from_file(stripped)


def load_document(source: str) -> dict[str, Any]:
    """Load a spec and inline every internal ``$ref``.

    Raises:
        MalformedSpecError: If loading, parsing, or dereferencing fails.
    """
    raw = load_spec(source)
    return resolve_refs(raw)


def spec_version(spec: dict[str, Any]) -> Optional[str]:
    """Return the declared ``openapi`` or ``swagger`` version, if any.

    Example::

        >>> spec_version({"swagger": "2.0"})
        '2.0'
    """
    for key in ("openapi", "swagger"):
        if key in spec:
            return str(spec[key])
    return None


def _load_from_text(text: str) -> dict[str, Any]:
    """Parse a document passed inline. Only JSON is accepted here."""
    try:
        result = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedSpecError(f"Invalid JSON: {exc}") from exc
    return _ensure_object(result)


def _load_from_stdin() -> dict[str, Any]:
    """Read spec from stdin.

    Raises:
        MalformedSpecError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise MalformedSpecError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise MalformedSpecError("No input received from stdin")

    return _parse_content(content)


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch spec from URL. Supports JSON and YAML responses.

    Raises:
        MalformedSpecError: If the URL cannot be fetched or content cannot be parsed.
    """
    logger.debug("Fetching spec from %s", url)
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise MalformedSpecError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise MalformedSpecError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load spec from a local ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        MalformedSpecError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise MalformedSpecError(
            f"Not a URL, JSON document, or existing file: {path}"
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedSpecError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise MalformedSpecError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Raises:
        MalformedSpecError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _ensure_object(json.loads(content))
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise MalformedSpecError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise MalformedSpecError(msg) from exc

    # YAML timestamps load as date/datetime; later stages expect JSON types
    return _ensure_object(json.loads(json.dumps(result, default=str)))


def _ensure_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise MalformedSpecError(f"Spec must be a JSON/YAML object (got {kind})")
    return result
