"""Inline internal ``$ref`` pointers so later stages see one self-contained tree.

Both Swagger 2.x (``#/definitions/...``, ``#/parameters/...``) and
OpenAPI 3.x (``#/components/...``) documents are handled the same way:
every ``{"$ref": "#/..."}`` node is replaced by a copy of its target.

Only same-document references are supported. A reference to another file or
URL, or one whose target does not exist, raises
:class:`~runway.exceptions.MalformedSpecError`.

Self-referencing schemas (trees, linked lists) would expand forever, so a
reference that is already being expanded further up the current branch is
left in place as its ``$ref`` dict.
"""

from __future__ import annotations

import copy
from typing import Any

from runway.exceptions import MalformedSpecError


def resolve_refs(document: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *document* with every internal ``$ref`` inlined.

    Args:
        document: The raw document as returned by
            :func:`~runway.parser.loader.load_spec`.

    Returns:
        A new dictionary; *document* itself is not modified.

    Raises:
        MalformedSpecError: On external or dangling references.

    Example::

        doc = {
            "definitions": {"Pet": {"type": "object"}},
            "paths": {"/pets": {"get": {"responses": {"200": {
                "schema": {"$ref": "#/definitions/Pet"}}}}}},
        }
        resolve_refs(doc)["paths"]["/pets"]["get"]["responses"]["200"]["schema"]
        # {'type': 'object'}
    """
    root = copy.deepcopy(document)
    return _inline(root, root, frozenset())


def _lookup(ref: str, root: dict[str, Any]) -> Any:
    """Follow a ``#/a/b/0`` JSON Pointer (RFC 6901) from the document root."""
    if not ref.startswith("#/"):
        raise MalformedSpecError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    node: Any = root
    for token in ref[2:].split("/"):
        key = token.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict):
            if key not in node:
                raise MalformedSpecError(
                    f"Cannot resolve $ref '{ref}': key '{key}' not found"
                )
            node = node[key]
        elif isinstance(node, list):
            try:
                node = node[int(key)]
            except (ValueError, IndexError) as exc:
                raise MalformedSpecError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{key}'"
                ) from exc
        else:
            raise MalformedSpecError(
                f"Cannot resolve $ref '{ref}': cannot descend into "
                f"{type(node).__name__}"
            )
    return node


def _inline(node: Any, root: dict[str, Any], expanding: frozenset[str]) -> Any:
    """Depth-first copy of *node* with references replaced by their targets.

    *expanding* holds the references open on the current branch only, so two
    siblings pointing at the same schema both get expanded.
    """
    if isinstance(node, list):
        return [_inline(item, root, expanding) for item in node]

    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str):
        if ref in expanding:
            return node
        return _inline(_lookup(ref, root), root, expanding | {ref})

    return {key: _inline(value, root, expanding) for key, value in node.items()}
