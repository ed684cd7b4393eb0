"""Select the security scheme for an endpoint and describe how to satisfy it.

Resolution order:

1. The endpoint's own ``security`` list, or the spec-wide default when the
   endpoint declares none.
2. The first requirement of that list, and the first scheme name in it.
3. That name looked up in ``security_schemes``.

A requirement may name several schemes that must all be satisfied at once.
Only the first one is surfaced; the full requirement stays on the model.

Nothing found at any step means the endpoint needs no credentials and
:func:`detect_auth` returns ``None``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from runway.auth import instructions
from runway.models import (
    ApiKeySecurityScheme,
    AuthInfo,
    Endpoint,
    HTTPSecurityScheme,
    NormalizedSpec,
    OAuth2SecurityScheme,
    OpenIdConnectSecurityScheme,
    ParameterLocation,
    SecurityScheme,
    UnknownSecurityScheme,
)

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_NAME = "X-API-Key"

_NON_ALNUM = re.compile(r"[^A-Z0-9]+")


def detect_auth(spec: NormalizedSpec, endpoint: Endpoint) -> Optional[AuthInfo]:
    """Return how to authenticate *endpoint*, or ``None`` if it is open.

    Args:
        spec: The normalized spec the endpoint belongs to.
        endpoint: The endpoint to call.

    Returns:
        An :class:`~runway.models.AuthInfo`, or ``None`` when no
        requirement applies or the referenced scheme is not declared.
    """
    requirements = endpoint.security or spec.default_security
    if not requirements:
        return None

    first = requirements[0]
    if not first:
        return None
    scheme_name = next(iter(first))

    scheme = spec.security_schemes.get(scheme_name)
    if scheme is None:
        logger.debug(
            "%s references undeclared security scheme %r", endpoint.label, scheme_name
        )
        return None

    return build_auth_info(scheme_name, scheme)


def env_var_name(scheme_name: str, scheme: SecurityScheme) -> str:
    """Derive the environment variable that will hold the credential.

    Example::

        >>> env_var_name("bearer-auth", HTTPSecurityScheme(scheme="bearer"))
        'BEARER_AUTH_TOKEN'
    """
    base = _NON_ALNUM.sub("_", scheme_name.upper())

    if isinstance(scheme, ApiKeySecurityScheme):
        return f"{base}_API_KEY"
    if isinstance(scheme, HTTPSecurityScheme) and _http_scheme(scheme) == "bearer":
        return f"{base}_TOKEN"
    if isinstance(scheme, OAuth2SecurityScheme):
        return f"{base}_ACCESS_TOKEN"
    return f"{base}_KEY"


def build_auth_info(scheme_name: str, scheme: SecurityScheme) -> AuthInfo:
    """Work out placement and instructions for one named scheme.

    Every arm of the :data:`~runway.models.SecurityScheme` union is handled
    here; adding an arm means adding a branch.
    """
    env_var = env_var_name(scheme_name, scheme)
    reference = f"${env_var}"

    if isinstance(scheme, ApiKeySecurityScheme):
        name = scheme.name or DEFAULT_API_KEY_NAME
        location = _api_key_location(scheme.location)
        return AuthInfo(
            scheme_name=scheme_name,
            scheme=scheme,
            env_var_name=env_var,
            location=location,
            header_name=name,
            header_value=reference,
            setup_instructions=instructions.api_key_instructions(
                env_var, name, location.value
            ),
        )

    if isinstance(scheme, HTTPSecurityScheme):
        http_scheme = _http_scheme(scheme)
        if http_scheme == "bearer":
            prefix = "Bearer "
            setup = instructions.bearer_instructions(env_var)
        elif http_scheme == "basic":
            prefix = "Basic "
            setup = instructions.basic_instructions(env_var)
        else:
            prefix = ""
            setup = instructions.generic_http_instructions(env_var, scheme.scheme)
        return _authorization_header(scheme_name, scheme, env_var, prefix, setup)

    if isinstance(scheme, OAuth2SecurityScheme):
        return _authorization_header(
            scheme_name,
            scheme,
            env_var,
            "Bearer ",
            instructions.oauth2_instructions(env_var, scheme),
        )

    if isinstance(scheme, OpenIdConnectSecurityScheme):
        return _authorization_header(
            scheme_name,
            scheme,
            env_var,
            "Bearer ",
            instructions.openid_connect_instructions(env_var, scheme),
        )

    if isinstance(scheme, UnknownSecurityScheme):
        logger.debug("Unsupported security scheme type %r for %r", scheme.type, scheme_name)
        return AuthInfo(
            scheme_name=scheme_name,
            scheme=scheme,
            env_var_name=env_var,
            setup_instructions=instructions.unknown_scheme_instructions(scheme_name),
        )

    raise TypeError(f"Unhandled security scheme: {type(scheme).__name__}")


def _authorization_header(
    scheme_name: str,
    scheme: SecurityScheme,
    env_var: str,
    prefix: str,
    setup: list[str],
) -> AuthInfo:
    return AuthInfo(
        scheme_name=scheme_name,
        scheme=scheme,
        env_var_name=env_var,
        header_name="Authorization",
        value_prefix=prefix,
        header_value=f"{prefix}${env_var}",
        setup_instructions=setup,
    )


def _http_scheme(scheme: HTTPSecurityScheme) -> str:
    # scheme names are case-insensitive (RFC 7235)
    return (scheme.scheme or "").lower()


def _api_key_location(value: Optional[str]) -> ParameterLocation:
    if value == "query":
        return ParameterLocation.QUERY
    if value == "cookie":
        return ParameterLocation.COOKIE
    return ParameterLocation.HEADER
