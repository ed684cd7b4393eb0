"""runway -- Turn an OpenAPI/Swagger document into a quick-start guide.

Given an OpenAPI 3.x or Swagger 2.x document (URL, raw JSON, file, or stdin),
runway normalizes it into a single version-agnostic model, picks the endpoint
that is easiest to try first, works out which credentials are needed to call
it, and renders ready-to-run request snippets for curl, JavaScript ``fetch``
and Python ``requests``.

Typical workflow::

    runway guide https://petstore3.swagger.io/api/v3/openapi.json
    runway guide spec.json --endpoint "GET /users" --format python
    runway guide spec.json --export quickstart.md --save

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    parser: Loading, ``$ref`` resolution and normalization.
    ranker: "Quick win" endpoint scoring.
    auth: Security scheme detection and credential setup instructions.
    snippets: Request snippet generation.
    pipeline: Glue that runs the stages in order.
    export: Markdown export of a quick-start guide.
    store: Disk-backed storage for generated guides.
    config: XDG-aware configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
