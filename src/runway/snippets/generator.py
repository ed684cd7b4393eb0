"""Render request snippets for curl, JavaScript ``fetch`` and Python ``requests``.

Every renderer takes the same three inputs -- an endpoint, a base URL and
the optional :class:`~runway.models.AuthInfo` -- and is deterministic.
Credentials only ever appear as a reference to ``AuthInfo.env_var_name``
in the syntax of the target language:

* curl: ``$NAME`` inside double quotes (expanded by the shell)
* fetch: ``${process.env.NAME}`` inside a template literal
* python: ``os.environ["NAME"]``

API keys declared ``in: query`` are appended to the query string and
``in: cookie`` keys go in a ``Cookie`` header; everything else is a regular
request header.
"""

from __future__ import annotations

import json
from typing import Callable, Optional

from runway.models import AuthInfo, Endpoint, ParameterLocation, Snippet, SnippetFormat
from runway.snippets.builders import append_query, build_url, example_body, python_literal

LANGUAGES: dict[SnippetFormat, str] = {
    SnippetFormat.CURL: "bash",
    SnippetFormat.FETCH: "javascript",
    SnippetFormat.PYTHON: "python",
}


def generate_snippets(
    endpoint: Endpoint, base_url: str, auth: Optional[AuthInfo] = None
) -> list[Snippet]:
    """Return one snippet per :class:`~runway.models.SnippetFormat`, in order."""
    return [generate_snippet(fmt, endpoint, base_url, auth) for fmt in SnippetFormat]


def generate_snippet(
    fmt: SnippetFormat,
    endpoint: Endpoint,
    base_url: str,
    auth: Optional[AuthInfo] = None,
) -> Snippet:
    """Render a single snippet in the requested format."""
    renderer = _RENDERERS[SnippetFormat(fmt)]
    return Snippet(
        format=fmt,
        code=renderer(endpoint, base_url, auth),
        language=LANGUAGES[SnippetFormat(fmt)],
    )


# ------------------------------------------------------------------ #
# curl
# ------------------------------------------------------------------ #


def render_curl(endpoint: Endpoint, base_url: str, auth: Optional[AuthInfo]) -> str:
    # <name> instead of {name}: curl treats braces in URLs as glob sets
    url = build_url(base_url, endpoint, placeholder="<{name}>")
    header = _auth_header(auth)
    if auth is not None and auth.location == ParameterLocation.QUERY and auth.header_name:
        url = append_query(url, f"{auth.header_name}=${auth.env_var_name}")

    lines = [f'curl -X {endpoint.method.value.upper()} "{url}"']

    if header is not None:
        name, prefix = header
        lines.append(f'  -H "{name}: {prefix}${auth.env_var_name}"')

    if endpoint.method.is_mutating:
        lines.append('  -H "Content-Type: application/json"')
        body = example_body(endpoint)
        if body is not None:
            payload = json.dumps(body, indent=2, ensure_ascii=False)
            lines.append("  -d '" + payload.replace("'", "'\\''") + "'")

    return " \\\n".join(lines)


# ------------------------------------------------------------------ #
# fetch
# ------------------------------------------------------------------ #


def render_fetch(endpoint: Endpoint, base_url: str, auth: Optional[AuthInfo]) -> str:
    url = build_url(base_url, endpoint)
    if auth is not None and auth.location == ParameterLocation.QUERY and auth.header_name:
        pair = f"{auth.header_name}=${{process.env.{auth.env_var_name}}}"
        url_literal = "`" + append_query(url.replace("`", "\\`"), pair) + "`"
    else:
        url_literal = _js_string(url)

    headers: list[tuple[str, str]] = []
    header = _auth_header(auth)
    if header is not None:
        name, prefix = header
        headers.append(
            (name, "`" + prefix + "${process.env." + auth.env_var_name + "}`")
        )
    if endpoint.method.is_mutating:
        headers.append(("Content-Type", _js_string("application/json")))

    options: list[str] = []
    if endpoint.method.value != "get":
        options.append(f"  method: {_js_string(endpoint.method.value.upper())}")
    if headers:
        header_lines = ",\n".join(
            f"    {_js_string(name)}: {value}" for name, value in headers
        )
        options.append("  headers: {\n" + header_lines + "\n  }")
    if endpoint.method.is_mutating:
        body = example_body(endpoint)
        if body is not None:
            payload = json.dumps(body, indent=2, ensure_ascii=False)
            options.append(
                "  body: JSON.stringify(" + payload.replace("\n", "\n  ") + ")"
            )

    if not options:
        return "\n".join(
            [
                f"const response = await fetch({url_literal})",
                "const data = await response.json()",
                "console.log(data)",
            ]
        )

    return "\n".join(
        [
            f"const response = await fetch({url_literal}, {{",
            ",\n".join(options),
            "})",
            "",
            "const data = await response.json()",
            "console.log(data)",
        ]
    )


# ------------------------------------------------------------------ #
# python
# ------------------------------------------------------------------ #


def render_python(endpoint: Endpoint, base_url: str, auth: Optional[AuthInfo]) -> str:
    url = json.dumps(build_url(base_url, endpoint), ensure_ascii=False)
    lines: list[str] = []

    if auth is not None and auth.header_name:
        lines += ["import os", ""]
    lines += ["import requests", ""]

    secret = ""
    if auth is not None:
        secret = f'os.environ["{auth.env_var_name}"]'

    headers: list[str] = []
    header = _auth_header(auth)
    if header is not None:
        name, prefix = header
        if prefix:
            value = f"f\"{prefix}{{os.environ['{auth.env_var_name}']}}\""
        else:
            value = secret
        headers.append(f"    {json.dumps(name)}: {value}")
    if endpoint.method.is_mutating:
        headers.append('    "Content-Type": "application/json"')

    arguments = [url]
    if headers:
        lines += ["headers = {", ",\n".join(headers), "}", ""]
        arguments.append("headers=headers")

    if auth is not None and auth.location == ParameterLocation.QUERY and auth.header_name:
        lines += [f"params = {{{json.dumps(auth.header_name)}: {secret}}}", ""]
        arguments.append("params=params")

    body = example_body(endpoint) if endpoint.method.is_mutating else None
    if body is not None:
        lines += [f"data = {python_literal(body)}", ""]
        arguments.append("json=data")

    call = f"requests.{endpoint.method.value}"
    if body is not None:
        lines.append(f"response = {call}(")
        lines += [f"    {argument}," for argument in arguments]
        lines.append(")")
    else:
        lines.append(f"response = {call}({', '.join(arguments)})")

    lines += ["", "print(response.json())"]
    return "\n".join(lines)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _auth_header(auth: Optional[AuthInfo]) -> Optional[tuple[str, str]]:
    """Header name and value prefix for header/cookie credentials.

    Returns ``None`` when there is nothing to send as a header: no auth,
    an unsupported scheme, or an API key that travels in the query string.
    """
    if auth is None or not auth.header_name:
        return None
    if auth.location == ParameterLocation.QUERY:
        return None
    if auth.location == ParameterLocation.COOKIE:
        return "Cookie", f"{auth.header_name}="
    return auth.header_name, auth.value_prefix


def _js_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


_RENDERERS: dict[SnippetFormat, Callable[[Endpoint, str, Optional[AuthInfo]], str]] = {
    SnippetFormat.CURL: render_curl,
    SnippetFormat.FETCH: render_fetch,
    SnippetFormat.PYTHON: render_python,
}
