"""Tests for runway.parser.resolver."""

from __future__ import annotations

import copy

import pytest

from runway.exceptions import MalformedSpecError
from runway.parser.resolver import _lookup, resolve_refs


class TestResolveRefs:
    """Test the top-level resolve_refs function."""

    def test_resolves_openapi_component_ref(self) -> None:
        spec = {
            "paths": {
                "/pets": {
                    "get": {
                        "responses": {
                            "200": {
                                "content": {
                                    "application/json": {
                                        "schema": {"$ref": "#/components/schemas/Pet"}
                                    }
                                }
                            }
                        }
                    }
                }
            },
            "components": {
                "schemas": {
                    "Pet": {"type": "object", "properties": {"name": {"type": "string"}}}
                }
            },
        }

        resolved = resolve_refs(spec)

        schema = resolved["paths"]["/pets"]["get"]["responses"]["200"]["content"][
            "application/json"
        ]["schema"]
        assert schema == {"type": "object", "properties": {"name": {"type": "string"}}}

    def test_resolves_swagger_definitions_and_parameters(self) -> None:
        spec = {
            "swagger": "2.0",
            "parameters": {"Limit": {"name": "limit", "in": "query", "type": "integer"}},
            "definitions": {"Order": {"type": "object"}},
            "paths": {
                "/orders": {
                    "get": {"parameters": [{"$ref": "#/parameters/Limit"}]},
                    "post": {
                        "parameters": [
                            {"in": "body", "name": "body", "schema": {"$ref": "#/definitions/Order"}}
                        ]
                    },
                }
            },
        }

        resolved = resolve_refs(spec)

        orders = resolved["paths"]["/orders"]
        assert orders["get"]["parameters"][0]["name"] == "limit"
        assert orders["post"]["parameters"][0]["schema"] == {"type": "object"}

    def test_nested_refs_are_followed(self) -> None:
        spec = {
            "a": {"$ref": "#/b"},
            "b": {"inner": {"$ref": "#/c"}},
            "c": {"value": 1},
        }
        assert resolve_refs(spec)["a"] == {"inner": {"value": 1}}

    def test_does_not_mutate_original(self) -> None:
        spec = {"x": {"$ref": "#/y"}, "y": {"type": "string"}}
        original = copy.deepcopy(spec)
        resolve_refs(spec)
        assert spec == original

    def test_sibling_refs_to_same_target_both_expand(self) -> None:
        spec = {
            "left": {"$ref": "#/shared"},
            "right": {"$ref": "#/shared"},
            "shared": {"type": "integer"},
        }
        resolved = resolve_refs(spec)
        assert resolved["left"] == resolved["right"] == {"type": "integer"}

    def test_circular_ref_is_left_in_place(self) -> None:
        spec = {
            "components": {
                "schemas": {
                    "Node": {
                        "type": "object",
                        "properties": {"next": {"$ref": "#/components/schemas/Node"}},
                    }
                }
            },
            "root": {"$ref": "#/components/schemas/Node"},
        }
        resolved = resolve_refs(spec)
        assert resolved["root"]["properties"]["next"] == {"$ref": "#/components/schemas/Node"}

    def test_external_ref_raises(self) -> None:
        with pytest.raises(MalformedSpecError, match="External \\$ref not supported"):
            resolve_refs({"a": {"$ref": "other.json#/Pet"}})

    def test_dangling_ref_raises(self) -> None:
        with pytest.raises(MalformedSpecError, match="key 'Missing' not found"):
            resolve_refs({"definitions": {}, "a": {"$ref": "#/definitions/Missing"}})


class TestLookup:
    """JSON Pointer traversal."""

    def test_escaped_tokens(self) -> None:
        root = {"paths": {"/pets/{id}": {"get": {"ok": True}}, "a~b": 1}}
        assert _lookup("#/paths/~1pets~1{id}/get", root) == {"ok": True}
        assert _lookup("#/paths/a~0b", root) == 1

    def test_array_index(self) -> None:
        root = {"servers": [{"url": "a"}, {"url": "b"}]}
        assert _lookup("#/servers/1/url", root) == "b"

    def test_bad_array_index_raises(self) -> None:
        with pytest.raises(MalformedSpecError, match="invalid array index"):
            _lookup("#/servers/9", {"servers": []})

    def test_descending_into_scalar_raises(self) -> None:
        with pytest.raises(MalformedSpecError, match="cannot descend"):
            _lookup("#/a/b", {"a": 5})
