"""Shared pieces used by every snippet renderer.

* :func:`build_url` -- base URL + path with path parameters filled in and
  required query parameters appended.
* :func:`example_body` -- an example JSON request body, taken from the spec
  or synthesized from the body schema.
* :func:`placeholder_value` -- a type/format driven stand-in value.
* :func:`python_literal` -- render JSON-like data as Python source.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from runway.models import Endpoint, Parameter, ParameterLocation

JSON_MEDIA_TYPES = ("application/json", "*/*")

_STRING_FORMAT_PLACEHOLDERS: dict[str, str] = {
    "email": "user@example.com",
    "date": "2025-01-01",
    "date-time": "2025-01-01T00:00:00Z",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": "00000000-0000-0000-0000-000000000000",
}


def build_url(base_url: str, endpoint: Endpoint, placeholder: str = "{{{name}}}") -> str:
    """Return the request URL for *endpoint*.

    Path parameters are replaced with their ``example`` when one is declared,
    otherwise with *placeholder* formatted with the parameter name. Required
    query parameters are appended as ``name=value`` pairs in declaration
    order; optional ones are left out.

    Args:
        base_url: Server URL; a trailing slash is dropped.
        endpoint: The endpoint to call.
        placeholder: ``str.format`` template receiving ``name``. The default
            keeps the literal ``{name}`` token.

    Example::

        >>> build_url("https://api.example.com/", endpoint)  # GET /users/{id}
        'https://api.example.com/users/{id}'
    """
    url = base_url.rstrip("/") + endpoint.path

    for param in endpoint.parameters:
        if param.location == ParameterLocation.PATH:
            url = url.replace("{" + param.name + "}", _param_value(param, placeholder))

    query = [
        f"{param.name}={_param_value(param, placeholder)}"
        for param in endpoint.parameters
        if param.location == ParameterLocation.QUERY and param.required
    ]
    if query:
        url += "?" + "&".join(query)

    return url


def append_query(url: str, pair: str) -> str:
    """Append a ``name=value`` pair, choosing ``?`` or ``&``."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{pair}"


def example_body(endpoint: Endpoint) -> Optional[Any]:
    """Return an example JSON body for *endpoint*, or ``None``.

    Looks at the ``application/json`` (then ``*/*``) media type. A literal
    example wins; otherwise the schema's own example, and failing that an
    object built from the schema's *required* properties.
    """
    body = endpoint.request_body
    if body is None:
        return None

    media = None
    for wanted in JSON_MEDIA_TYPES:
        for media_type, entry in body.content.items():
            if media_type.split(";")[0].strip().lower() == wanted:
                media = entry
                break
        if media is not None:
            break

    if media is None:
        return None
    if media.example is not None:
        return media.example
    if media.schema_ is not None:
        return _example_from_schema(media.schema_)
    return None


def _example_from_schema(schema: dict[str, Any]) -> Optional[Any]:
    if schema.get("example") is not None:
        return schema["example"]

    properties = schema.get("properties")
    if schema_type(schema) != "object" or not isinstance(properties, dict):
        return None

    required = schema.get("required") or []
    result: dict[str, Any] = {}
    for name, prop in properties.items():
        if name not in required:
            continue
        prop = prop if isinstance(prop, dict) else {}
        if prop.get("example") is not None:
            result[name] = prop["example"]
        elif prop.get("default") is not None:
            result[name] = prop["default"]
        else:
            result[name] = placeholder_value(prop)

    return result or None


def schema_type(schema: dict[str, Any]) -> Optional[str]:
    """Return the schema's type, picking the first non-null entry of a 3.1 type array."""
    value = schema.get("type")
    if isinstance(value, list):
        non_null = [t for t in value if t != "null"]
        return non_null[0] if non_null else None
    return value


def placeholder_value(schema: dict[str, Any]) -> Any:
    """Stand-in value for a property with no example or default.

    Example::

        >>> placeholder_value({"type": "string", "format": "email"})
        'user@example.com'
        >>> placeholder_value({"type": "integer"})
        0
    """
    kind = schema_type(schema)
    if kind == "string":
        return _STRING_FORMAT_PLACEHOLDERS.get(schema.get("format") or "", "string")
    if kind in ("number", "integer"):
        return 0
    if kind == "boolean":
        return True
    if kind == "array":
        return []
    if kind == "object":
        return {}
    return None


def python_literal(value: Any, indent: int = 4, level: int = 0) -> str:
    """Render JSON-compatible *value* as Python source with block indentation.

    Example::

        >>> print(python_literal({"ok": True, "tags": []}))
        {
            "ok": True,
            "tags": []
        }
    """
    inner = " " * indent * (level + 1)
    outer = " " * indent * level

    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{inner}{python_literal(str(key))}: {python_literal(item, indent, level + 1)}"
            for key, item in value.items()
        ]
        return "{\n" + ",\n".join(items) + "\n" + outer + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{inner}{python_literal(item, indent, level + 1)}" for item in value]
        return "[\n" + ",\n".join(items) + "\n" + outer + "]"
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(str(value), ensure_ascii=False)


def _param_value(param: Parameter, placeholder: str) -> str:
    value = param.example
    if value is None or value == "":
        return placeholder.format(name=param.name)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
