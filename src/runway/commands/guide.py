"""Guide commands -- build and redisplay quick-start guides.

``runway guide SOURCE`` parses a spec, picks the best first endpoint (or
the one given with ``--endpoint``) and prints the auth setup plus request
snippets. ``--export`` writes the same guide as Markdown and ``--save``
stores it under a short slug that ``runway show SLUG`` brings back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from runway.commands import current_config, exit_on_error
from runway.exceptions import ConfigError
from runway.models import AuthInfo, GlobalConfig, QuickStart, Snippet, SnippetFormat
from runway.output import (
    OutputFormat,
    format_response,
    get_output,
    info,
    print_code,
    print_data,
    print_heading,
    success,
    suggest,
)


def guide_command(
    ctx: typer.Context,
    source: str = typer.Argument(
        help="Spec URL, file path, raw JSON text, or '-' for stdin."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", "-e", help="Endpoint to document, e.g. 'GET /users'."
    ),
    snippet_format: Optional[SnippetFormat] = typer.Option(
        None, "--format", "-f", help="Only show snippets in this format."
    ),
    server: int = typer.Option(
        0, "--server", "-s", help="Index of the server to use as base URL."
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export",
        help="Write the guide as Markdown (a directory gets the default file name).",
    ),
    save: bool = typer.Option(
        False, "--save", help="Store the guide so 'runway show' can display it again."
    ),
) -> None:
    """Generate a quick-start guide for an API.

    Example::

        runway guide https://petstore3.swagger.io/api/v3/openapi.json
        runway guide openapi.yaml --endpoint "POST /pets" --format python
        runway guide openapi.json --export docs/ --save
    """
    from runway.config import get_store_dir
    from runway.export import export_filename, write_markdown
    from runway.pipeline import build_quick_start, find_endpoint, parse_and_select
    from runway.store import GuideStore

    with exit_on_error():
        config = current_config(ctx)
        result = parse_and_select(source)
        spec = result.spec
        selected = find_endpoint(spec, endpoint) if endpoint else result.best_endpoint

        quick_start = build_quick_start(
            spec,
            selected,
            server_index=server,
            alternatives_limit=config.snippets.alternatives_limit,
        )
        present_guide(quick_start, _snippet_filter(snippet_format, config), source)

        if export is not None:
            path = export / export_filename(spec) if export.is_dir() else export
            written = write_markdown(quick_start, path)
            success(f"Exported guide to {written}")

        if save:
            store = GuideStore(get_store_dir(config), config.store)
            try:
                stored = store.save(spec, quick_start.endpoint, spec_url=_spec_url(source))
            finally:
                store.close()
            success(f"Saved guide {stored.slug}")
            suggest(f"Show it again with: runway show {stored.slug}")


def show_command(
    ctx: typer.Context,
    slug: str = typer.Argument(help="Slug printed by 'runway guide --save'."),
    snippet_format: Optional[SnippetFormat] = typer.Option(
        None, "--format", "-f", help="Only show snippets in this format."
    ),
) -> None:
    """Show a previously saved guide.

    Example::

        runway show k3x9a0qz
    """
    from runway.config import get_store_dir
    from runway.pipeline import build_quick_start, find_endpoint
    from runway.store import GuideStore

    with exit_on_error():
        config = current_config(ctx)
        store = GuideStore(get_store_dir(config), config.store)
        try:
            stored = store.load(slug)
        finally:
            store.close()

        quick_start = build_quick_start(
            stored.spec,
            find_endpoint(stored.spec, stored.endpoint),
            alternatives_limit=config.snippets.alternatives_limit,
        )
        info(f"Guide {stored.slug}, created {stored.created_at:%Y-%m-%d}, views: {stored.view_count}")
        present_guide(quick_start, _snippet_filter(snippet_format, config), stored.spec_url)


def present_guide(
    quick_start: QuickStart,
    snippet_format: Optional[SnippetFormat] = None,
    source: Optional[str] = None,
) -> None:
    """Print *quick_start* to stdout in the active output format."""
    snippets = [
        s for s in quick_start.snippets if snippet_format is None or s.format == snippet_format
    ]

    if get_output().format == OutputFormat.JSON:
        format_response(guide_payload(quick_start, snippets))
        return

    spec = quick_start.spec
    endpoint = quick_start.endpoint
    auth = quick_start.auth

    print_heading(f"{spec.title} Quick Start")
    print_data(f"Version:  {spec.version}")
    print_data(f"Base URL: {quick_start.base_url}")

    step = 1
    if auth is not None:
        print_data("")
        print_heading(f"Step {step}: Set up authentication")
        print_code("\n".join(auth.setup_instructions), "bash")
        step += 1

    print_data("")
    print_heading(f"Step {step}: Make your first request")
    line = endpoint.label
    if endpoint.summary:
        line += f" -- {endpoint.summary}"
    print_data(line)

    for snippet in snippets:
        print_data("")
        print_heading(snippet.format.value)
        print_code(snippet.code, snippet.language)

    if quick_start.alternatives:
        print_data("")
        print_heading("Other endpoints to try")
        for other in quick_start.alternatives:
            entry = f"  {other.label}"
            if other.summary:
                entry += f" -- {other.summary}"
            print_data(entry)
        if source:
            suggest(f'runway guide {source} --endpoint "{quick_start.alternatives[0].label}"')


def guide_payload(quick_start: QuickStart, snippets: list[Snippet]) -> dict[str, Any]:
    """JSON-ready summary of a guide, used by ``--json``."""
    endpoint = quick_start.endpoint
    auth = quick_start.auth
    return {
        "api": quick_start.spec.title,
        "version": quick_start.spec.version,
        "base_url": quick_start.base_url,
        "endpoint": {
            "method": endpoint.method.value.upper(),
            "path": endpoint.path,
            "summary": endpoint.summary,
        },
        "auth": auth_payload(auth) if auth is not None else None,
        "snippets": [
            {"format": s.format.value, "language": s.language, "code": s.code}
            for s in snippets
        ],
        "alternatives": [other.label for other in quick_start.alternatives],
    }


def auth_payload(auth: AuthInfo) -> dict[str, Any]:
    return {
        "scheme": auth.scheme_name,
        "type": auth.scheme.type,
        "env_var": auth.env_var_name,
        "location": auth.location.value,
        "header_name": auth.header_name,
        "header_value": auth.header_value,
        "setup_instructions": list(auth.setup_instructions),
    }


def _snippet_filter(
    snippet_format: Optional[SnippetFormat], config: GlobalConfig
) -> Optional[SnippetFormat]:
    if snippet_format is not None:
        return snippet_format
    default = config.snippets.default_format
    if not default:
        return None
    try:
        return SnippetFormat(default)
    except ValueError:
        raise ConfigError(
            f"Invalid snippets.default_format {default!r} "
            f"(expected one of: {', '.join(f.value for f in SnippetFormat)})"
        ) from None


def _spec_url(source: str) -> Optional[str]:
    stripped = source.strip()
    if stripped.startswith(("http://", "https://")):
        return stripped
    return None
