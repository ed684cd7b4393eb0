"""Inspect commands -- examine a spec without generating a guide.

``endpoints`` shows every endpoint with its quick-win score, ``auth`` shows
the declared security schemes and the one that applies to an endpoint, and
``info`` prints the API metadata.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from runway.commands import exit_on_error
from runway.models import (
    ApiKeySecurityScheme,
    HTTPSecurityScheme,
    OAuth2SecurityScheme,
    OpenIdConnectSecurityScheme,
    SecurityScheme,
)
from runway.output import (
    OutputFormat,
    format_response,
    get_output,
    info,
    print_code,
    print_data,
    print_heading,
    print_table,
)


def endpoints_command(
    source: str = typer.Argument(
        help="Spec URL, file path, raw JSON text, or '-' for stdin."
    ),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Only show the N best endpoints."
    ),
) -> None:
    """List endpoints ranked by how easy they are to try first.

    Example::

        runway endpoints openapi.json --limit 10
    """
    from runway.parser import parse_spec
    from runway.ranker import rank_endpoints

    with exit_on_error():
        spec = parse_spec(source)

    ranked = rank_endpoints(spec)
    if not ranked:
        info("No endpoints defined in this spec.")
        return
    if limit is not None:
        ranked = ranked[:limit]

    headers = ["Rank", "Score", "Method", "Path", "Summary"]
    rows = [
        [
            str(rank),
            str(item.score),
            item.endpoint.method.value.upper(),
            item.endpoint.path,
            item.endpoint.summary or "-",
        ]
        for rank, item in enumerate(ranked, start=1)
    ]
    print_table(headers, rows, title=f"{spec.title} -- Endpoints ({len(spec.endpoints)})")


def auth_command(
    source: str = typer.Argument(
        help="Spec URL, file path, raw JSON text, or '-' for stdin."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", "-e", help="Endpoint to check; defaults to the best one."
    ),
) -> None:
    """Show security schemes and how to authenticate an endpoint.

    Example::

        runway auth openapi.json
        runway auth openapi.json --endpoint "DELETE /pets/{petId}"
    """
    from runway.auth import detect_auth
    from runway.commands.guide import auth_payload
    from runway.pipeline import find_endpoint, parse_and_select

    with exit_on_error():
        result = parse_and_select(source)
        spec = result.spec
        selected = find_endpoint(spec, endpoint) if endpoint else result.best_endpoint

    auth = detect_auth(spec, selected)

    if get_output().format == OutputFormat.JSON:
        format_response(
            {
                "endpoint": selected.label,
                "auth": auth_payload(auth) if auth is not None else None,
                "security_schemes": {
                    name: scheme.type for name, scheme in spec.security_schemes.items()
                },
            }
        )
        return

    if spec.security_schemes:
        rows = [
            [name, scheme.type, _scheme_details(scheme), (scheme.description or "-")[:60]]
            for name, scheme in spec.security_schemes.items()
        ]
        print_table(["Name", "Type", "Details", "Description"], rows, title="Security Schemes")
    else:
        info("No security schemes defined.")

    print_heading(f"Authentication for {selected.label}")
    if auth is None:
        print_data("No authentication required.")
        return
    print_data(f"Scheme:   {auth.scheme_name} ({auth.scheme.type})")
    print_data(f"Env var:  {auth.env_var_name}")
    if auth.header_name:
        print_data(f"Sent as:  {auth.location.value} '{auth.header_name}'")
    print_code("\n".join(auth.setup_instructions), "bash")


def info_command(
    source: str = typer.Argument(
        help="Spec URL, file path, raw JSON text, or '-' for stdin."
    ),
) -> None:
    """Show API info (title, version, servers, counts).

    Example::

        runway info openapi.json --json
    """
    from runway.parser import load_document, normalize_spec, spec_version

    with exit_on_error():
        document = load_document(source)
        spec = normalize_spec(document)

    data: dict[str, Any] = {
        "title": spec.title,
        "version": spec.version,
        "spec_version": spec_version(document) or "-",
        "description": spec.description or "-",
        "servers": [s.url for s in spec.servers],
        "endpoints": len(spec.endpoints),
        "security_schemes": list(spec.security_schemes),
    }
    format_response(data)


def _scheme_details(scheme: SecurityScheme) -> str:
    if isinstance(scheme, ApiKeySecurityScheme):
        return f"{scheme.location or 'header'}: {scheme.name or '-'}"
    if isinstance(scheme, HTTPSecurityScheme):
        return scheme.scheme or "-"
    if isinstance(scheme, OAuth2SecurityScheme) and scheme.flows is not None:
        flows = scheme.flows.model_dump(exclude_none=True)
        return ", ".join(flows) or "-"
    if isinstance(scheme, OpenIdConnectSecurityScheme):
        return scheme.openid_connect_url or "-"
    return "-"
