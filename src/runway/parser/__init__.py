"""OpenAPI/Swagger parsing -- load, resolve ``$ref`` pointers, and normalize.

This sub-package is the first stage of the runway pipeline: turning a raw
OpenAPI 3.x or Swagger 2.x document (URL, raw JSON text, local file, or
stdin) into a :class:`~runway.models.NormalizedSpec` that the ranker, auth
resolver and snippet generator can consume.

Typical usage::

    from runway.parser import parse_spec

    spec = parse_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    for endpoint in spec.endpoints:
        print(endpoint.label)

Sub-modules:

* :mod:`~runway.parser.loader` -- I/O layer (URL, raw JSON, file, stdin)
  plus format detection.
* :mod:`~runway.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
* :mod:`~runway.parser.normalizer` -- Builds the version-agnostic
  :class:`~runway.models.NormalizedSpec`.
"""

from runway.parser.loader import load_document, load_spec, spec_version
from runway.parser.normalizer import normalize_spec, parse_spec
from runway.parser.resolver import resolve_refs

__all__ = [
    "load_document",
    "load_spec",
    "normalize_spec",
    "parse_spec",
    "resolve_refs",
    "spec_version",
]
