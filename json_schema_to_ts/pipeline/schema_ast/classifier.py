"""
Shape classification of schema nodes.

A schema node is an untyped bag of optional keywords; its meaning depends on
which keywords are present. `classify` maps a node to exactly one
`SchemaShape`, checking the rules in a fixed order. It never looks at the
node's children or ancestors.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from ..errors import ShapeError

_TYPE_SEPARATOR = re.compile(r"\s*,\s*")

# Keywords that make an untyped node an object
_OBJECT_KEYWORDS = ("properties", "patternProperties", "required", "extends")


class SchemaShape(Enum):
    """Closed set of shape categories."""

    ALL_OF = "all_of"
    ANY_OF = "any_of"
    ONE_OF = "one_of"
    REFERENCE = "reference"
    CUSTOM_TYPE = "custom_type"
    BOUNDED_ARRAY = "bounded_array"
    UNBOUNDED_ARRAY = "unbounded_array"
    ENUM = "enum"
    BOOLEAN = "boolean"
    NULL = "null"
    NUMBER = "number"
    STRING = "string"
    NAMED_OBJECT = "named_object"
    UNNAMED_OBJECT = "unnamed_object"
    ANY = "any"

    @property
    def is_union(self) -> bool:
        return self in (SchemaShape.ANY_OF, SchemaShape.ONE_OF)

    @property
    def is_object(self) -> bool:
        return self in (SchemaShape.NAMED_OBJECT, SchemaShape.UNNAMED_OBJECT)


def schema_types(schema: dict[str, Any]) -> list[str] | None:
    """Return the declared types of a node as a list, or None when absent.

    Comma separated strings ("number, null") are split like type arrays.
    """
    raw_type = schema.get("type")
    if raw_type is None:
        return None
    if isinstance(raw_type, str):
        return [t for t in _TYPE_SEPARATOR.split(raw_type.strip()) if t]
    if isinstance(raw_type, list):
        return list(raw_type)
    raise ShapeError(f"Invalid schema type {raw_type!r}")


def is_nullable(schema: dict[str, Any]) -> bool:
    """Whether a node is declared as `[T, "null"]`.

    A single type, including "null" alone, is never nullable: it is just
    that type.
    """
    types = schema_types(schema)
    if not types:
        return False
    non_null = [t for t in types if t != "null"]
    if len(types) == 1 or not non_null:
        return False
    if len(types) != 2 or len(non_null) != 1:
        raise ShapeError(f"Multiple type specification of '{schema.get('type')}' can only include one non-null JSON type")
    return True


def has_identifying_name(schema: dict[str, Any]) -> bool:
    return bool(schema.get("title") or schema.get("$id") or schema.get("id"))


def _is_object_like(schema: dict[str, Any]) -> bool:
    if any(k in schema for k in _OBJECT_KEYWORDS):
        return True
    return isinstance(schema.get("additionalProperties"), dict)


def _object_shape(schema: dict[str, Any]) -> SchemaShape:
    return SchemaShape.NAMED_OBJECT if has_identifying_name(schema) else SchemaShape.UNNAMED_OBJECT


def _single_type(types: list[str]) -> str:
    """Reduce a type array to its one non-null entry (or "null")."""
    if len(types) == 0:
        raise ShapeError("Type arrays must have at least one element")
    if len(types) > 2:
        raise ShapeError("Array type specifiers cannot contain more than 2 types.")
    if len(types) == 2 and "null" not in types:
        raise ShapeError("Type arrays with more than one element must have a null item.")
    non_null = [t for t in types if t != "null"]
    if len(types) == 2 and not non_null:
        raise ShapeError("Type arrays with more than one element must have exactly one non-null item.")
    return non_null[0] if non_null else "null"


def classify(schema: dict[str, Any]) -> SchemaShape:
    """Classify a normalized schema node.

    Rules, first match wins:
        1. allOf / anyOf / oneOf
        2. $ref
        3. tsType
        4. items
        5. enum
        6. type (or object-like body when type is absent)

    Raises:
        ShapeError: For malformed type arrays and unsupported type names
    """
    if "allOf" in schema:
        return SchemaShape.ALL_OF
    if "anyOf" in schema:
        return SchemaShape.ANY_OF
    if "oneOf" in schema:
        return SchemaShape.ONE_OF
    if "$ref" in schema:
        return SchemaShape.REFERENCE
    if "tsType" in schema:
        return SchemaShape.CUSTOM_TYPE
    if "items" in schema:
        if isinstance(schema["items"], list):
            return SchemaShape.BOUNDED_ARRAY
        return SchemaShape.UNBOUNDED_ARRAY
    if "enum" in schema:
        return SchemaShape.ENUM

    types = schema_types(schema)
    if types is None:
        if _is_object_like(schema) or has_identifying_name(schema):
            return _object_shape(schema)
        return SchemaShape.ANY

    match _single_type(types):
        case "string":
            return SchemaShape.STRING
        case "number" | "integer":
            return SchemaShape.NUMBER
        case "boolean":
            return SchemaShape.BOOLEAN
        case "null":
            return SchemaShape.NULL
        case "array":
            return SchemaShape.UNBOUNDED_ARRAY
        case "object":
            return _object_shape(schema)
        case other:
            raise ShapeError(f"'{other}' is an unsupported type.")
