"""Setup instructions shown before the first request.

Each builder returns a list of lines meant for a ``bash`` code block: comment
lines that explain where the credential comes from, followed by an
``export`` of the environment variable the snippets read. Placeholder values
here are for the reader to replace; they never reach generated snippets.
"""

from __future__ import annotations

from runway.models import OAuth2SecurityScheme, OpenIdConnectSecurityScheme


def api_key_instructions(env_var: str, name: str, location: str) -> list[str]:
    if location == "query":
        placement = f"Query param: {name}"
    elif location == "cookie":
        placement = f"Cookie: {name}"
    else:
        placement = f"Header: {name}"
    return [
        "# Get your API key from the provider's dashboard",
        f'export {env_var}="your-api-key-here"',
        "",
        f"# The key will be sent as: {placement}",
    ]


def bearer_instructions(env_var: str) -> list[str]:
    return [
        "# Get your access token from the provider",
        f'export {env_var}="your-access-token-here"',
        "",
        "# The token will be sent as: Authorization: Bearer <token>",
    ]


def basic_instructions(env_var: str) -> list[str]:
    return [
        "# Encode your credentials as base64(username:password)",
        f'export {env_var}=$(echo -n "username:password" | base64)',
        "",
        "# The credentials will be sent as: Authorization: Basic <encoded>",
    ]


def generic_http_instructions(env_var: str, scheme: str | None) -> list[str]:
    label = f"'{scheme}' " if scheme else ""
    return [
        f"# Set {env_var} to your {label}Authorization header value",
        f'export {env_var}="your-credentials-here"',
    ]


def oauth2_instructions(env_var: str, scheme: OAuth2SecurityScheme) -> list[str]:
    """Explain how to get a token, preferring the client-credentials flow.

    Only the first of clientCredentials and authorizationCode that the
    scheme declares is described.
    """
    lines = ["# OAuth2 authentication required"]
    flows = scheme.flows

    if flows is not None and flows.client_credentials is not None:
        lines += [
            f"# Token URL: {flows.client_credentials.token_url}",
            "# Use client credentials flow to obtain an access token",
            "",
        ]
    elif flows is not None and flows.authorization_code is not None:
        lines += [
            f"# Authorization URL: {flows.authorization_code.authorization_url}",
            f"# Token URL: {flows.authorization_code.token_url}",
            "# Use authorization code flow to obtain an access token",
            "",
        ]
    else:
        lines.append("# Obtain an access token via OAuth2")

    lines.append(f'export {env_var}="your-access-token-here"')
    return lines


def openid_connect_instructions(
    env_var: str, scheme: OpenIdConnectSecurityScheme
) -> list[str]:
    lines = ["# Obtain a token via OpenID Connect"]
    if scheme.openid_connect_url:
        lines.append(f"# Discovery document: {scheme.openid_connect_url}")
    lines.append(f'export {env_var}="your-access-token-here"')
    return lines


def unknown_scheme_instructions(scheme_name: str) -> list[str]:
    return [f"# Configure {scheme_name} authentication"]
