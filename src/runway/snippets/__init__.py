"""Request snippet generation for a chosen endpoint.

Typical usage::

    from runway.snippets import generate_snippets

    for snippet in generate_snippets(endpoint, spec.base_url, auth):
        print(snippet.format.value, snippet.code, sep="\\n")

Sub-modules:

* :mod:`~runway.snippets.builders` -- URL assembly, example bodies and
  placeholder values shared by every renderer.
* :mod:`~runway.snippets.generator` -- curl, ``fetch`` and ``requests``
  renderers.
"""

from runway.snippets.generator import LANGUAGES, generate_snippet, generate_snippets

__all__ = ["LANGUAGES", "generate_snippet", "generate_snippets"]
