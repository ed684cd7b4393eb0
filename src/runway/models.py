"""Canonical Pydantic models shared across all runway modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`SnippetsConfig`, :class:`StoreConfig` and
    :class:`GlobalConfig`.

**Normalized spec models** -- produced by the normalizer from either an
OpenAPI 3.x or a Swagger 2.x document and never mutated afterwards:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`MediaType`, :class:`RequestBody`, :class:`ResponseInfo`, the
    :data:`SecurityScheme` union, :class:`Endpoint`, :class:`ServerInfo` and
    :class:`NormalizedSpec`.

**Pipeline output models** -- produced by the ranker, auth resolver and
snippet generator:
    :class:`ScoringPolicy`, :class:`ScoredEndpoint`, :class:`AuthInfo`,
    :class:`Snippet`, :class:`GuideResult`, :class:`QuickStart` and
    :class:`StoredGuide`.

All models use Pydantic v2. Spec models are ``frozen`` so that downstream
stages can share them freely.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class SnippetsConfig(BaseModel):
    """Snippet rendering defaults stored in :class:`GlobalConfig`."""

    default_format: Optional[str] = Field(
        default=None,
        description="Only render this snippet format (curl, fetch, python); all when unset",
    )
    alternatives_limit: int = Field(
        default=4, description="How many alternative endpoints to list"
    )


class StoreConfig(BaseModel):
    """Guide store settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Allow saving guides")
    ttl_seconds: Optional[int] = Field(
        default=None, description="Expire stored guides after this many seconds"
    )
    directory: Optional[str] = Field(
        default=None, description="Override the store directory"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/runway/config.json``.

    Loaded and saved by :func:`~runway.config.load_global_config` and
    :func:`~runway.config.save_global_config`. See
    :func:`~runway.config.resolve_config` for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    snippets: SnippetsConfig = Field(default_factory=SnippetsConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)


# --- Normalized spec ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods runway extracts from a path item.

    Definition order is the traversal order used by the normalizer. HEAD,
    OPTIONS and TRACE operations are never extracted.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    @property
    def is_mutating(self) -> bool:
        """Whether requests with this method conventionally carry a JSON body."""
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single operation parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Any = None


class MediaType(BaseModel):
    """One entry of a ``content`` map: an optional schema and literal example."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    example: Any = None


class RequestBody(BaseModel):
    """Request body declared by an :class:`Endpoint`, keyed by media type."""

    model_config = ConfigDict(frozen=True)

    required: bool = False
    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)


class ResponseInfo(BaseModel):
    """Response metadata for a single status code."""

    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    content: Optional[dict[str, MediaType]] = None


class OAuthFlow(BaseModel):
    """A single OAuth2 flow object."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    authorization_url: Optional[str] = Field(default=None, alias="authorizationUrl")
    token_url: Optional[str] = Field(default=None, alias="tokenUrl")
    refresh_url: Optional[str] = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(BaseModel):
    """The ``flows`` map of an OAuth2 security scheme."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = Field(
        default=None, alias="clientCredentials"
    )
    authorization_code: Optional[OAuthFlow] = Field(
        default=None, alias="authorizationCode"
    )


class ApiKeySecurityScheme(BaseModel):
    """``type: apiKey`` -- a key sent in a header, query parameter or cookie."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["apiKey"] = "apiKey"
    description: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = Field(default=None, alias="in")


class HTTPSecurityScheme(BaseModel):
    """``type: http`` -- an ``Authorization`` header scheme (bearer, basic, ...)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["http"] = "http"
    description: Optional[str] = None
    scheme: Optional[str] = None
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")


class OAuth2SecurityScheme(BaseModel):
    """``type: oauth2`` -- tokens obtained through one of the declared flows."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["oauth2"] = "oauth2"
    description: Optional[str] = None
    flows: Optional[OAuthFlows] = None


class OpenIdConnectSecurityScheme(BaseModel):
    """``type: openIdConnect`` -- tokens obtained via OIDC discovery."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["openIdConnect"] = "openIdConnect"
    description: Optional[str] = None
    openid_connect_url: Optional[str] = Field(default=None, alias="openIdConnectUrl")


class UnknownSecurityScheme(BaseModel):
    """Any scheme whose ``type`` is not one of the four OpenAPI 3 types.

    Swagger 2 ``type: basic`` definitions land here, as do vendor types.
    The raw fields are preserved in ``model_extra``.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = ""
    description: Optional[str] = None


_KNOWN_SCHEME_TYPES = frozenset({"apiKey", "http", "oauth2", "openIdConnect"})


def _security_scheme_tag(value: Any) -> str:
    """Pick the union arm for a raw or already-built security scheme."""
    if isinstance(value, dict):
        scheme_type = value.get("type")
    else:
        scheme_type = getattr(value, "type", None)
    return scheme_type if scheme_type in _KNOWN_SCHEME_TYPES else "unknown"


SecurityScheme = Annotated[
    Union[
        Annotated[ApiKeySecurityScheme, Tag("apiKey")],
        Annotated[HTTPSecurityScheme, Tag("http")],
        Annotated[OAuth2SecurityScheme, Tag("oauth2")],
        Annotated[OpenIdConnectSecurityScheme, Tag("openIdConnect")],
        Annotated[UnknownSecurityScheme, Tag("unknown")],
    ],
    Discriminator(_security_scheme_tag),
]
"""Closed tagged union over the supported security scheme shapes."""

SecurityRequirement = dict[str, list[str]]
"""Scheme name -> required scopes. Several keys mean all schemes are required."""


class Endpoint(BaseModel):
    """One HTTP method on one path."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: dict[str, ResponseInfo] = Field(default_factory=dict)
    security: list[SecurityRequirement] = Field(
        default_factory=list,
        description="Endpoint-level requirements; empty inherits the spec default",
    )
    tags: list[str] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """``METHOD /path`` as shown to users and accepted by ``--endpoint``."""
        return f"{self.method.value.upper()} {self.path}"


class ServerInfo(BaseModel):
    """A server base URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class NormalizedSpec(BaseModel):
    """Version-agnostic view of an OpenAPI 3.x or Swagger 2.x document.

    Built once by :func:`~runway.parser.normalizer.normalize_spec` and
    read by every later stage. ``servers`` is never empty; ``endpoints``
    may be.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    version: str
    description: Optional[str] = None
    servers: list[ServerInfo] = Field(min_length=1)
    endpoints: list[Endpoint] = Field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = Field(default_factory=dict)
    default_security: list[SecurityRequirement] = Field(default_factory=list)

    @property
    def base_url(self) -> str:
        """URL of the first server."""
        return self.servers[0].url


# --- Pipeline output ---


class ScoringPolicy(BaseModel):
    """Weights and path patterns for the "quick win" endpoint heuristic.

    ``quick_win_patterns`` are regular expressions matched case-insensitively
    against the whole path. Only the first matching pattern counts and it
    adds ``pattern_base - index``, so earlier patterns rank higher.
    """

    model_config = ConfigDict(frozen=True)

    quick_win_patterns: tuple[str, ...] = (
        r"/health",
        r"/ping",
        r"/status",
        r"/me",
        r"/user",
        r"/users/me",
        r"/api/health",
        r"/api/ping",
        r"/api/status",
        r"/v\d+/health",
        r"/v\d+/me",
    )
    collection_pattern: str = r"/[a-z]+s?"
    get_bonus: int = 100
    pattern_base: int = 50
    required_param_penalty: int = 10
    no_body_bonus: int = 20
    segment_penalty: int = 2
    path_param_penalty: int = 15
    summary_bonus: int = 5
    collection_bonus: int = 10


class ScoredEndpoint(BaseModel):
    """An endpoint paired with its heuristic score."""

    model_config = ConfigDict(frozen=True)

    endpoint: Endpoint
    score: int


class AuthInfo(BaseModel):
    """How to supply credentials for one endpoint.

    Secrets are never stored here: ``header_value`` is a template that only
    references :attr:`env_var_name` (e.g. ``Bearer $PETSTORE_TOKEN``).
    """

    model_config = ConfigDict(frozen=True)

    scheme_name: str
    scheme: SecurityScheme
    env_var_name: str
    location: ParameterLocation = ParameterLocation.HEADER
    header_name: Optional[str] = None
    value_prefix: str = ""
    header_value: str = ""
    setup_instructions: list[str] = Field(default_factory=list)


class SnippetFormat(str, enum.Enum):
    """Supported snippet styles, in rendering order."""

    CURL = "curl"
    FETCH = "fetch"
    PYTHON = "python"


class Snippet(BaseModel):
    """Generated source text for one request style."""

    model_config = ConfigDict(frozen=True)

    format: SnippetFormat
    code: str
    language: str


class GuideResult(BaseModel):
    """Output of :func:`~runway.pipeline.parse_and_select`."""

    model_config = ConfigDict(frozen=True)

    spec: NormalizedSpec
    best_endpoint: Optional[Endpoint] = None


class QuickStart(BaseModel):
    """Everything needed to present a getting-started guide for one endpoint."""

    model_config = ConfigDict(frozen=True)

    spec: NormalizedSpec
    endpoint: Endpoint
    base_url: str
    auth: Optional[AuthInfo] = None
    snippets: list[Snippet] = Field(default_factory=list)
    alternatives: list[Endpoint] = Field(default_factory=list)


class StoredGuide(BaseModel):
    """A normalized spec saved under a short slug by :class:`~runway.store.GuideStore`."""

    slug: str
    api_name: str
    spec_url: Optional[str] = None
    api_domain: Optional[str] = None
    spec: NormalizedSpec
    endpoint: str = Field(description="Selected endpoint as 'METHOD /path'")
    created_at: datetime
    view_count: int = 0
