"""
Tool Schema Conversion
======================

Tools declare their parameters as JSON Schema. Both backends accept JSON
Schema for declared parameters (OpenAI as `function.parameters`, Anthropic
as `input_schema`), but each only understands a core subset, and both
require the top level to be an object.

to_wire_schema() walks a declaration structurally and keeps the validation
keywords of JSON Schema 2020-12:

    type / nullable type lists          enum / const
    properties / required               patternProperties
    additionalProperties               min/maxProperties
    dependentRequired                  dependentSchemas / propertyNames
    items / prefixItems / contains      min/maxItems, min/maxContains
    anyOf / oneOf / allOf / not         if / then / else
    unevaluatedProperties / Items      numeric and string bounds
    description / default / format

Local "$ref": "#/$defs/..." references are inlined; any other reference is
rejected. Every other keyword is dropped, which covers the annotations the
backends don't understand ($schema, $id, title, examples, $comment). A
declaration written with the keywords above validates the same arguments
before and after conversion.
"""

from typing import Any

# Keywords copied verbatim (their values are not schemas)
_SCALAR_KEYWORDS = (
    "type",
    "description",
    "enum",
    "const",
    "default",
    "format",
    "pattern",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "minLength",
    "maxLength",
    "minItems",
    "maxItems",
    "uniqueItems",
    "multipleOf",
    "minProperties",
    "maxProperties",
    "minContains",
    "maxContains",
)

# Keywords whose values are single schemas (or booleans)
_SCHEMA_KEYWORDS = (
    "items",
    "contains",
    "additionalProperties",
    "propertyNames",
    "unevaluatedProperties",
    "unevaluatedItems",
    "not",
    "if",
    "then",
    "else",
)

# Keywords whose values map names to schemas
_SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties", "dependentSchemas")

# Keywords whose values are lists of schemas
_SCHEMA_LIST_KEYWORDS = ("anyOf", "oneOf", "allOf", "prefixItems")


def to_wire_schema(schema: dict[str, Any] | None) -> dict[str, Any]:
    """
    Convert a tool's parameter declaration to the declared-parameters shape.

    Args:
        schema: JSON Schema for the tool's arguments (None for no arguments)

    Returns:
        An object schema with `type`, `properties` and `required` always present

    Raises:
        ValueError: If the top level is not an object schema, or a $ref
            cannot be resolved
    """
    if not schema:
        return {"type": "object", "properties": {}, "required": []}

    definitions = schema.get("$defs") or schema.get("definitions") or {}
    converted = _convert(schema, definitions, seen=())
    # Tool arguments are always an object
    if "properties" in converted:
        converted.setdefault("type", "object")

    if converted.get("type") != "object":
        raise ValueError(
            f"Tool parameters must be an object schema, got type {converted.get('type')!r}"
        )

    converted.setdefault("properties", {})
    converted.setdefault("required", [])
    return converted


def _convert(node: Any, definitions: dict, seen: tuple[str, ...]) -> Any:
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        return _convert(_resolve_ref(node["$ref"], definitions, seen), definitions, seen + (node["$ref"],))

    result: dict[str, Any] = {}

    for keyword in _SCALAR_KEYWORDS:
        if keyword in node:
            value = node[keyword]
            result[keyword] = list(value) if isinstance(value, (list, tuple)) else value

    for keyword in _SCHEMA_MAP_KEYWORDS:
        if keyword in node:
            result[keyword] = {
                name: _convert(sub, definitions, seen)
                for name, sub in node[keyword].items()
            }
    if "required" in node:
        result["required"] = list(node["required"])

    if "dependentRequired" in node:
        result["dependentRequired"] = {
            name: list(names) for name, names in node["dependentRequired"].items()
        }

    # Booleans pass through _convert unchanged
    for keyword in _SCHEMA_KEYWORDS:
        if keyword in node:
            result[keyword] = _convert(node[keyword], definitions, seen)

    for keyword in _SCHEMA_LIST_KEYWORDS:
        if keyword in node:
            result[keyword] = [_convert(option, definitions, seen) for option in node[keyword]]

    if "enum" in result and "type" not in result:
        result["type"] = _infer_enum_type(result["enum"])

    return result


def _resolve_ref(ref: str, definitions: dict, seen: tuple[str, ...]) -> dict:
    if ref in seen:
        raise ValueError(f"Recursive schema reference is not supported: {ref}")

    for prefix in ("#/$defs/", "#/definitions/"):
        if ref.startswith(prefix):
            name = ref[len(prefix):]
            if name in definitions:
                return definitions[name]

    raise ValueError(f"Unresolvable schema reference: {ref}")


def _infer_enum_type(values: list) -> str | list[str]:
    """Infer a JSON type for an enum declared without one."""
    types = []
    for value in values:
        if isinstance(value, bool):
            name = "boolean"
        elif isinstance(value, int):
            name = "integer"
        elif isinstance(value, float):
            name = "number"
        elif value is None:
            name = "null"
        else:
            name = "string"
        if name not in types:
            types.append(name)
    return types[0] if len(types) == 1 else types
