"""Tests for runway.auth.detector and runway.auth.instructions."""

from __future__ import annotations

import pytest

from runway.auth import build_auth_info, detect_auth, env_var_name
from runway.models import (
    ApiKeySecurityScheme,
    Endpoint,
    HTTPMethod,
    HTTPSecurityScheme,
    NormalizedSpec,
    OAuth2SecurityScheme,
    OAuthFlows,
    ParameterLocation,
    ServerInfo,
    UnknownSecurityScheme,
)


def _endpoint(spec: NormalizedSpec, path: str) -> Endpoint:
    return next(e for e in spec.endpoints if e.path == path)


class TestDetectAuth:
    """Scheme selection."""

    def test_default_security_applies(self, petstore_spec: NormalizedSpec) -> None:
        auth = detect_auth(petstore_spec, _endpoint(petstore_spec, "/health"))
        assert auth is not None
        assert auth.scheme_name == "BearerAuth"

    def test_endpoint_security_overrides_default(self, petstore_spec: NormalizedSpec) -> None:
        delete = next(e for e in petstore_spec.endpoints if e.method == HTTPMethod.DELETE)
        auth = detect_auth(petstore_spec, delete)
        assert auth is not None
        assert auth.scheme_name == "ApiKeyAuth"

    def test_no_security_anywhere(self, complex_auth_spec: NormalizedSpec) -> None:
        assert detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/open")) is None

    def test_undeclared_scheme(self, complex_auth_spec: NormalizedSpec) -> None:
        assert detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/ghost")) is None

    def test_empty_requirement_object(self) -> None:
        spec = NormalizedSpec(
            title="T",
            version="1",
            servers=[ServerInfo(url="https://x")],
            security_schemes={"k": ApiKeySecurityScheme(name="k", location="header")},
            default_security=[{}],
        )
        assert detect_auth(spec, Endpoint(path="/x", method=HTTPMethod.GET)) is None

    def test_and_requirement_surfaces_first_scheme(self, complex_auth_spec: NormalizedSpec) -> None:
        endpoint = _endpoint(complex_auth_spec, "/admin")
        auth = detect_auth(complex_auth_spec, endpoint)
        assert auth.scheme_name == "basicAuth"
        # the full requirement stays on the model
        assert set(endpoint.security[0]) == {"basicAuth", "OAuth"}


class TestEnvVarName:
    def test_bearer(self) -> None:
        assert env_var_name("BearerAuth", HTTPSecurityScheme(scheme="bearer")) == "BEARERAUTH_TOKEN"

    def test_bearer_scheme_is_case_insensitive(self) -> None:
        assert env_var_name("jwt", HTTPSecurityScheme(scheme="Bearer")) == "JWT_TOKEN"

    def test_api_key(self) -> None:
        assert env_var_name("api_key", ApiKeySecurityScheme()) == "API_KEY_API_KEY"

    def test_oauth2(self) -> None:
        assert env_var_name("OAuth", OAuth2SecurityScheme()) == "OAUTH_ACCESS_TOKEN"

    def test_other_types(self) -> None:
        assert env_var_name("basicAuth", HTTPSecurityScheme(scheme="basic")) == "BASICAUTH_KEY"

    def test_non_alphanumerics_collapse(self) -> None:
        assert env_var_name("my-api.key v2", ApiKeySecurityScheme()) == "MY_API_KEY_V2_API_KEY"


class TestBuildAuthInfo:
    """Placement and instructions per scheme type."""

    def test_bearer(self, petstore_spec: NormalizedSpec) -> None:
        auth = detect_auth(petstore_spec, _endpoint(petstore_spec, "/health"))
        assert auth.env_var_name == "BEARERAUTH_TOKEN"
        assert auth.header_name == "Authorization"
        assert auth.value_prefix == "Bearer "
        assert auth.header_value == "Bearer $BEARERAUTH_TOKEN"
        assert 'export BEARERAUTH_TOKEN="your-access-token-here"' in auth.setup_instructions

    def test_api_key_header(self, petstore_spec: NormalizedSpec) -> None:
        delete = next(e for e in petstore_spec.endpoints if e.method == HTTPMethod.DELETE)
        auth = detect_auth(petstore_spec, delete)
        assert auth.location == ParameterLocation.HEADER
        assert auth.header_name == "X-API-Key"
        assert auth.header_value == "$APIKEYAUTH_API_KEY"
        assert "# The key will be sent as: Header: X-API-Key" in auth.setup_instructions

    def test_api_key_query(self, swagger_spec: NormalizedSpec) -> None:
        auth = detect_auth(swagger_spec, swagger_spec.endpoints[0])
        assert auth.location == ParameterLocation.QUERY
        assert auth.header_name == "api_key"
        assert "# The key will be sent as: Query param: api_key" in auth.setup_instructions

    def test_api_key_cookie(self, complex_auth_spec: NormalizedSpec) -> None:
        auth = detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/session"))
        assert auth.location == ParameterLocation.COOKIE
        assert auth.header_name == "SESSIONID"
        assert auth.env_var_name == "COOKIEAUTH_API_KEY"

    def test_api_key_without_name_uses_default_header(self) -> None:
        auth = build_auth_info("key", ApiKeySecurityScheme())
        assert auth.header_name == "X-API-Key"

    def test_basic(self, complex_auth_spec: NormalizedSpec) -> None:
        auth = detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/admin"))
        assert auth.value_prefix == "Basic "
        assert auth.header_value == "Basic $BASICAUTH_KEY"
        assert any("base64" in line for line in auth.setup_instructions)

    def test_other_http_scheme_has_no_prefix(self) -> None:
        auth = build_auth_info("sig", HTTPSecurityScheme(scheme="digest"))
        assert auth.header_name == "Authorization"
        assert auth.value_prefix == ""
        assert auth.header_value == "$SIG_KEY"

    def test_oauth2_prefers_client_credentials(self, complex_auth_spec: NormalizedSpec) -> None:
        auth = detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/me"))
        assert auth.env_var_name == "OAUTH_ACCESS_TOKEN"
        assert auth.header_value == "Bearer $OAUTH_ACCESS_TOKEN"
        assert "# Token URL: https://auth.example.com/oauth/token" in auth.setup_instructions
        assert not any("Authorization URL" in line for line in auth.setup_instructions)

    def test_oauth2_authorization_code(self) -> None:
        scheme = OAuth2SecurityScheme(
            flows=OAuthFlows.model_validate(
                {
                    "authorizationCode": {
                        "authorizationUrl": "https://a/authorize",
                        "tokenUrl": "https://a/token",
                    }
                }
            )
        )
        lines = build_auth_info("oa", scheme).setup_instructions
        assert "# Authorization URL: https://a/authorize" in lines
        assert "# Token URL: https://a/token" in lines
        assert lines[-1] == 'export OA_ACCESS_TOKEN="your-access-token-here"'

    def test_oauth2_without_flows(self) -> None:
        lines = build_auth_info("oa", OAuth2SecurityScheme()).setup_instructions
        assert "# Obtain an access token via OAuth2" in lines

    def test_openid_connect(self, complex_auth_spec: NormalizedSpec) -> None:
        auth = detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/profile"))
        assert auth.env_var_name == "OIDC_KEY"
        assert auth.value_prefix == "Bearer "
        assert any(".well-known/openid-configuration" in line for line in auth.setup_instructions)

    def test_unknown_type(self, complex_auth_spec: NormalizedSpec) -> None:
        auth = detect_auth(complex_auth_spec, _endpoint(complex_auth_spec, "/reports"))
        assert isinstance(auth.scheme, UnknownSecurityScheme)
        assert auth.header_name is None
        assert auth.setup_instructions == ["# Configure partnerAuth authentication"]

    def test_unhandled_type_raises(self) -> None:
        with pytest.raises(TypeError):
            build_auth_info("x", object())  # type: ignore[arg-type]
