"""Build a version-agnostic :class:`~runway.models.NormalizedSpec`.

This module walks a ``$ref``-resolved OpenAPI 3.x or Swagger 2.x document
and produces the single model every later stage works with. The two document
shapes differ in only a few places, each handled by one private helper:

* ``_extract_servers`` -- OpenAPI ``servers`` versus Swagger
  ``schemes``/``host``/``basePath``.
* ``_extract_security_schemes`` -- ``components.securitySchemes`` versus
  ``securityDefinitions`` (same field names, no translation).
* ``_extract_request_body`` -- OpenAPI ``requestBody`` versus a Swagger
  ``in: body`` parameter.

Only GET, POST, PUT, PATCH and DELETE operations are extracted, in that
order for each path. Path-level parameters apply to every operation of the
path unless the operation redeclares the same ``name`` and ``in``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from runway.exceptions import MalformedSpecError
from runway.models import (
    Endpoint,
    HTTPMethod,
    MediaType,
    NormalizedSpec,
    Parameter,
    ParameterLocation,
    RequestBody,
    ResponseInfo,
    SecurityScheme,
    ServerInfo,
)
from runway.parser.loader import load_document, spec_version

logger = logging.getLogger(__name__)

PLACEHOLDER_SERVER_URL = "https://api.example.com"

_LOCATIONS = frozenset(loc.value for loc in ParameterLocation)
_SCHEME_ADAPTER: TypeAdapter[Any] = TypeAdapter(SecurityScheme)


def parse_spec(source: str) -> NormalizedSpec:
    """Load, dereference and normalize a document in one call.

    Args:
        source: URL, raw JSON text, file path, or ``-`` for stdin.

    Raises:
        MalformedSpecError: If any step fails.
    """
    return normalize_spec(load_document(source))


def normalize_spec(document: dict[str, Any]) -> NormalizedSpec:
    """Convert a dereferenced document into a :class:`~runway.models.NormalizedSpec`.

    Args:
        document: An OpenAPI 3.x or Swagger 2.x document whose internal
            references have already been inlined.

    Returns:
        The normalized spec. ``servers`` always holds at least one entry.

    Raises:
        MalformedSpecError: If ``info.title``, ``info.version`` or ``paths``
            is missing, or a security scheme has an invalid shape.
    """
    if not isinstance(document, dict):
        raise MalformedSpecError("Spec must be a JSON/YAML object")

    info = document.get("info")
    if not isinstance(info, dict):
        raise MalformedSpecError("Spec is missing the 'info' object")
    for field in ("title", "version"):
        if info.get(field) is None:
            raise MalformedSpecError(f"Spec is missing 'info.{field}'")

    paths = document.get("paths")
    if not isinstance(paths, dict):
        raise MalformedSpecError("Spec is missing the 'paths' object")

    logger.debug(
        "Normalizing %r (declared version %s)",
        info["title"],
        spec_version(document) or "unknown",
    )

    security_schemes = _extract_security_schemes(document)
    try:
        endpoints = _extract_endpoints(document, paths)
        spec = NormalizedSpec(
            title=str(info["title"]),
            version=str(info["version"]),
            description=info.get("description"),
            servers=_extract_servers(document),
            endpoints=endpoints,
            security_schemes=security_schemes,
            default_security=document.get("security") or [],
        )
    except ValidationError as exc:
        raise MalformedSpecError(f"Spec has an invalid shape: {exc}") from exc

    logger.debug("Extracted %d endpoints", len(spec.endpoints))
    return spec


def _extract_servers(document: dict[str, Any]) -> list[ServerInfo]:
    """Explicit ``servers`` win, then a Swagger host, then the placeholder."""
    servers = document.get("servers")
    if servers:
        return [
            ServerInfo(url=server.get("url", "/"), description=server.get("description"))
            for server in servers
            if isinstance(server, dict)
        ] or [ServerInfo(url=PLACEHOLDER_SERVER_URL)]

    host = document.get("host")
    if host:
        schemes = document.get("schemes") or ["https"]
        base_path = document.get("basePath") or ""
        return [ServerInfo(url=f"{schemes[0]}://{host}{base_path}")]

    return [ServerInfo(url=PLACEHOLDER_SERVER_URL)]


def _extract_security_schemes(document: dict[str, Any]) -> dict[str, Any]:
    # non-mapping containers are treated as absent, like malformed path items
    components = _as_dict(document.get("components")) or {}
    raw_schemes = _as_dict(components.get("securitySchemes"))
    if not raw_schemes:
        raw_schemes = _as_dict(document.get("securityDefinitions")) or {}

    schemes: dict[str, Any] = {}
    for name, raw in raw_schemes.items():
        if not isinstance(raw, dict):
            continue
        try:
            schemes[name] = _SCHEME_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            raise MalformedSpecError(
                f"Invalid security scheme '{name}': {exc}"
            ) from exc
    return schemes


def _extract_endpoints(
    document: dict[str, Any], paths: dict[str, Any]
) -> list[Endpoint]:
    doc_consumes = document.get("consumes") or []
    endpoints: list[Endpoint] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters") or []

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue

            raw_params = _merge_parameters(path_params, operation.get("parameters") or [])
            consumes = operation.get("consumes") or doc_consumes

            endpoints.append(
                Endpoint(
                    path=path,
                    method=method,
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    parameters=_extract_parameters(raw_params),
                    request_body=_extract_request_body(operation, raw_params, consumes),
                    responses=_extract_responses(operation.get("responses") or {}),
                    security=operation.get("security") or [],
                    tags=operation.get("tags") or [],
                )
            )

    return endpoints


def _merge_parameters(
    path_params: list[Any], op_params: list[Any]
) -> list[dict[str, Any]]:
    """Path-level parameters first, minus any the operation redeclares."""
    op_params = [p for p in op_params if isinstance(p, dict)]
    overridden = {(p.get("name"), p.get("in")) for p in op_params}
    merged = [
        p
        for p in path_params
        if isinstance(p, dict) and (p.get("name"), p.get("in")) not in overridden
    ]
    merged.extend(op_params)
    return merged


def _extract_parameters(raw_params: list[dict[str, Any]]) -> list[Parameter]:
    parameters: list[Parameter] = []
    for raw in raw_params:
        location = raw.get("in")
        if not isinstance(location, str) or location not in _LOCATIONS:
            # body is lifted into the request body; formData has no equivalent
            if location != "body":
                logger.debug(
                    "Skipping parameter %r with location %r", raw.get("name"), location
                )
            continue

        schema = raw.get("schema")
        if schema is None and "type" in raw:
            # Swagger 2 puts the type on the parameter itself
            schema = {k: raw[k] for k in ("type", "format", "enum", "default", "items") if k in raw}

        parameters.append(
            Parameter(
                name=raw.get("name", ""),
                location=ParameterLocation(location),
                required=bool(raw.get("required", False)),
                description=raw.get("description"),
                schema=_as_dict(schema),
                example=raw.get("example"),
            )
        )
    return parameters


def _extract_request_body(
    operation: dict[str, Any],
    raw_params: list[dict[str, Any]],
    consumes: list[str],
) -> Optional[RequestBody]:
    body = operation.get("requestBody")
    if isinstance(body, dict):
        return RequestBody(
            required=bool(body.get("required", False)),
            description=body.get("description"),
            content=_extract_content(body.get("content") or {}),
        )

    for raw in raw_params:
        if raw.get("in") == "body":
            media = MediaType(schema=_as_dict(raw.get("schema")), example=raw.get("example"))
            return RequestBody(
                required=bool(raw.get("required", False)),
                description=raw.get("description"),
                content={ct: media for ct in (consumes or ["application/json"])},
            )

    return None


def _extract_content(content: dict[str, Any]) -> dict[str, MediaType]:
    return {
        media_type: MediaType(schema=_as_dict(entry.get("schema")), example=entry.get("example"))
        for media_type, entry in content.items()
        if isinstance(entry, dict)
    }


def _extract_responses(responses: dict[str, Any]) -> dict[str, ResponseInfo]:
    result: dict[str, ResponseInfo] = {}
    for status_code, response in responses.items():
        if not isinstance(response, dict):
            continue
        content = response.get("content")
        result[str(status_code)] = ResponseInfo(
            description=response.get("description"),
            content=_extract_content(content) if isinstance(content, dict) else None,
        )
    return result


def _as_dict(value: Any) -> Optional[dict[str, Any]]:
    return value if isinstance(value, dict) else None
