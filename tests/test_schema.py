"""Unit tests for tool schema conversion."""

import jsonschema
import pytest

from switchboard.providers import to_wire_schema


def assert_same_verdicts(declared, wire, samples):
    for sample in samples:
        assert jsonschema.Draft202012Validator(declared).is_valid(sample) == \
            jsonschema.Draft202012Validator(wire).is_valid(sample), sample


def test_empty_schema_becomes_empty_object():
    assert to_wire_schema(None) == {"type": "object", "properties": {}, "required": []}
    assert to_wire_schema({}) == {"type": "object", "properties": {}, "required": []}


def test_required_and_properties_are_always_present():
    wire = to_wire_schema({"type": "object", "properties": {"days": {"type": "integer"}}})

    assert wire["properties"] == {"days": {"type": "integer"}}
    assert wire["required"] == []


def test_drops_unsupported_keywords():
    wire = to_wire_schema({
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Args",
        "type": "object",
        "properties": {"q": {"type": "string", "title": "Query", "examples": ["x"]}},
        "required": ["q"],
    })

    assert "$schema" not in wire
    assert "title" not in wire
    assert wire["properties"]["q"] == {"type": "string"}


def test_inlines_local_refs():
    wire = to_wire_schema({
        "type": "object",
        "$defs": {"Platform": {"enum": ["twitter", "linkedin"]}},
        "properties": {"platform": {"$ref": "#/$defs/Platform"}},
        "required": ["platform"],
    })

    assert wire["properties"]["platform"] == {"enum": ["twitter", "linkedin"], "type": "string"}
    assert "$defs" not in wire


def test_recursive_ref_is_rejected():
    with pytest.raises(ValueError):
        to_wire_schema({
            "type": "object",
            "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
            "properties": {"root": {"$ref": "#/$defs/Node"}},
        })


def test_non_object_top_level_is_rejected():
    with pytest.raises(ValueError):
        to_wire_schema({"type": "string"})


def test_conversion_keeps_validation_behavior():
    declared = {
        "type": "object",
        "properties": {
            "repo": {"type": "string", "minLength": 1},
            "state": {"type": "string", "enum": ["open", "closed", "all"]},
            "labels": {"type": "array", "items": {"type": "string"}},
            "limit": {"anyOf": [{"type": "integer", "minimum": 1}, {"type": "null"}]},
        },
        "required": ["repo"],
        "additionalProperties": False,
    }
    wire = to_wire_schema(declared)

    samples = [
        {"repo": "acme/api"},
        {"repo": "acme/api", "state": "open", "labels": ["bug"], "limit": 5},
        {"repo": ""},
        {"repo": "acme/api", "state": "merged"},
        {"repo": "acme/api", "labels": [1]},
        {"repo": "acme/api", "limit": 0},
        {"repo": "acme/api", "extra": True},
        {"state": "open"},
    ]
    assert_same_verdicts(declared, wire, samples)


def test_conditional_and_structural_keywords_survive():
    declared = {
        "type": "object",
        "properties": {
            "kind": {"enum": ["file", "url"]},
            "path": {"type": "string"},
            "url": {"type": "string"},
            "range": {"type": "array", "prefixItems": [{"type": "integer"}, {"type": "integer"}]},
            "tags": {"type": "array", "contains": {"const": "urgent"}, "minContains": 1},
        },
        "patternProperties": {"^x-": {"type": "string"}},
        "additionalProperties": False,
        "minProperties": 1,
        "maxProperties": 4,
        "dependentRequired": {"url": ["kind"]},
        "if": {"properties": {"kind": {"const": "file"}}, "required": ["kind"]},
        "then": {"required": ["path"]},
        "else": {"not": {"required": ["path"]}},
    }
    wire = to_wire_schema(declared)

    for keyword in ("patternProperties", "minProperties", "maxProperties",
                    "dependentRequired", "if", "then", "else"):
        assert keyword in wire
    assert wire["else"] == {"not": {"required": ["path"]}}
    assert wire["properties"]["range"]["prefixItems"] == [{"type": "integer"}, {"type": "integer"}]

    samples = [
        {},
        {"kind": "file", "path": "a.txt"},
        {"kind": "file"},
        {"kind": "url", "url": "https://example.com"},
        {"kind": "url", "path": "a.txt"},
        {"url": "https://example.com"},
        {"kind": "url", "x-trace": "abc"},
        {"kind": "url", "x-trace": 1},
        {"kind": "url", "range": [1, "two"]},
        {"kind": "url", "range": [1, 2]},
        {"kind": "url", "tags": ["later"]},
        {"kind": "url", "tags": ["urgent"]},
        {"kind": "url", "url": "u", "range": [1, 2], "tags": ["urgent"], "x-a": "b"},
    ]
    assert_same_verdicts(declared, wire, samples)


def test_nested_schemas_are_not_given_a_type():
    declared = {
        "type": "object",
        "properties": {
            "value": {"not": {"properties": {"a": {"type": "string"}}}},
        },
    }
    wire = to_wire_schema(declared)

    assert wire["properties"]["value"] == declared["properties"]["value"]
    assert_same_verdicts(declared, wire, [{"value": 3}, {"value": {"a": 1}}, {"value": {"a": "x"}}])
