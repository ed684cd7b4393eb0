"""Run the guide stages in order: normalize, rank, resolve auth, render.

Each stage either succeeds completely or raises; nothing here retries or
returns partial results.

Typical usage::

    from runway.pipeline import build_quick_start, parse_and_select

    result = parse_and_select("https://example.com/openapi.json")
    guide = build_quick_start(result.spec, result.best_endpoint)
"""

from __future__ import annotations

import logging
from typing import Optional

from runway.auth import detect_auth
from runway.exceptions import EndpointNotFoundError, InvalidUsageError, NoEndpointsError
from runway.models import Endpoint, GuideResult, HTTPMethod, NormalizedSpec, QuickStart
from runway.parser import parse_spec
from runway.ranker import alternatives, pick_best
from runway.snippets import generate_snippets

logger = logging.getLogger(__name__)


def parse_and_select(source: str) -> GuideResult:
    """Parse *source* and pick the endpoint to showcase.

    Raises:
        MalformedSpecError: If the document cannot be loaded or normalized.
        NoEndpointsError: If the document declares no usable endpoint.
    """
    spec = parse_spec(source)
    best = pick_best(spec)
    if best is None:
        raise NoEndpointsError(f"'{spec.title}' has no usable endpoints")
    return GuideResult(spec=spec, best_endpoint=best)


def build_quick_start(
    spec: NormalizedSpec,
    endpoint: Optional[Endpoint] = None,
    server_index: int = 0,
    alternatives_limit: int = 4,
) -> QuickStart:
    """Resolve auth and render snippets for *endpoint* (the best one by default).

    Args:
        spec: A normalized spec.
        endpoint: Endpoint to document. ``None`` picks the best-ranked one.
        server_index: Which entry of ``spec.servers`` to use as base URL.
        alternatives_limit: Maximum number of alternatives to list.

    Raises:
        NoEndpointsError: If *endpoint* is ``None`` and the spec has none.
        InvalidUsageError: If *server_index* is out of range.
    """
    if endpoint is None:
        endpoint = pick_best(spec)
        if endpoint is None:
            raise NoEndpointsError(f"'{spec.title}' has no usable endpoints")

    if not 0 <= server_index < len(spec.servers):
        raise InvalidUsageError(
            f"Server index {server_index} out of range "
            f"(spec declares {len(spec.servers)} server(s))"
        )
    base_url = spec.servers[server_index].url

    auth = detect_auth(spec, endpoint)
    logger.debug(
        "Building guide for %s against %s (auth: %s)",
        endpoint.label,
        base_url,
        auth.scheme_name if auth else "none",
    )

    return QuickStart(
        spec=spec,
        endpoint=endpoint,
        base_url=base_url,
        auth=auth,
        snippets=generate_snippets(endpoint, base_url, auth),
        alternatives=alternatives(spec, endpoint, limit=alternatives_limit),
    )


def find_endpoint(spec: NormalizedSpec, label: str) -> Endpoint:
    """Look up an endpoint by its ``METHOD /path`` label.

    The method is case-insensitive; the path must match exactly.

    Raises:
        InvalidUsageError: If *label* is not of the form ``METHOD /path``.
        EndpointNotFoundError: If the spec has no such endpoint.
    """
    parts = label.strip().split(None, 1)
    if len(parts) != 2 or not parts[1].startswith("/"):
        raise InvalidUsageError(
            f"Invalid endpoint '{label}': expected 'METHOD /path', e.g. 'GET /users'"
        )

    method_name, path = parts[0].lower(), parts[1].strip()
    try:
        method = HTTPMethod(method_name)
    except ValueError:
        supported = ", ".join(m.value.upper() for m in HTTPMethod)
        raise InvalidUsageError(
            f"Unsupported method '{parts[0]}' (supported: {supported})"
        ) from None

    for endpoint in spec.endpoints:
        if endpoint.method == method and endpoint.path == path:
            return endpoint

    raise EndpointNotFoundError(f"Endpoint '{method.value.upper()} {path}' not found in spec")
