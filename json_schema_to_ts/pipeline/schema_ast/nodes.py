"""
AST node definitions.

One AST node is built per distinct schema node. Nodes compare by identity
(`eq=False`): two schema nodes with identical content yield two AST nodes,
while one schema node reached twice (shared or cyclic) yields a single
instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AstKind(Enum):
    """Kind of an AST node."""

    LITERAL = "literal"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    NULL = "null"
    ANY = "any"
    INTERFACE = "interface"
    ARRAY = "array"
    TUPLE = "tuple"
    UNION = "union"
    INTERSECTION = "intersection"
    ENUM = "enum"
    REFERENCE = "reference"


@dataclass(eq=False)
class AstNode:
    """Base class for all AST nodes."""

    kind: AstKind = AstKind.ANY

    # Name under which the node is declared on its own, if any
    standalone_name: str | None = None

    # Schema description
    comment: str | None = None

    # Member key under which the node was first reached
    key_name: str | None = None

    # Whether standalone_name was synthesized by the parser
    internal_name: bool = False

    @property
    def has_standalone_name(self) -> bool:
        return bool(self.standalone_name)


@dataclass(eq=False)
class PrimitiveNode(AstNode):
    """boolean, number, string, null or any."""


@dataclass(eq=False)
class LiteralNode(AstNode):
    """A literal JSON value (enum member)."""

    kind: AstKind = AstKind.LITERAL
    value: Any = None


@dataclass(eq=False)
class ReferenceNode(AstNode):
    """Raw TypeScript type text provided by the schema (tsType)."""

    kind: AstKind = AstKind.REFERENCE
    type_name: str = ""


@dataclass(eq=False)
class InterfaceMember:
    """A member of an interface."""

    key_name: str = ""
    ast: AstNode | None = None
    is_required: bool = False
    is_nullable: bool = False

    # Default rendered as a TypeScript literal
    default: str | None = None
    has_default: bool = False

    # Pattern properties that cannot be expressed as a single index signature
    is_pattern_property: bool = False

    # Definitions parsed only so that their named types get declared
    is_unreachable_definition: bool = False

    # Single pattern property rendered as `[k: string]: T`
    is_index_signature: bool = False

    @property
    def is_rendered(self) -> bool:
        return not self.is_pattern_property and not self.is_unreachable_definition


@dataclass(eq=False)
class InterfaceNode(AstNode):
    """An object type with members."""

    kind: AstKind = AstKind.INTERFACE
    members: list[InterfaceMember] = field(default_factory=list)

    # Named interfaces or intersections listed under `extends`
    super_types: list[AstNode] = field(default_factory=list)

    def rendered_members(self) -> list[InterfaceMember]:
        return [m for m in self.members if m.is_rendered]


@dataclass(eq=False)
class ArrayNode(AstNode):
    """An array of one element type."""

    kind: AstKind = AstKind.ARRAY
    element: AstNode | None = None


@dataclass(eq=False)
class TupleNode(AstNode):
    """A bounded array with one type per position."""

    kind: AstKind = AstKind.TUPLE
    elements: list[AstNode] = field(default_factory=list)
    min_items: int = 0
    max_items: int | None = None

    # Type of the unbounded remainder
    spread: AstNode | None = None


@dataclass(eq=False)
class UnionNode(AstNode):
    """anyOf / oneOf."""

    kind: AstKind = AstKind.UNION
    members: list[AstNode] = field(default_factory=list)


@dataclass(eq=False)
class IntersectionNode(AstNode):
    """allOf."""

    kind: AstKind = AstKind.INTERSECTION
    members: list[AstNode] = field(default_factory=list)


@dataclass(eq=False)
class EnumNode(AstNode):
    """An enumeration of literal values."""

    kind: AstKind = AstKind.ENUM
    members: list[LiteralNode] = field(default_factory=list)


def children(node: AstNode) -> list[AstNode]:
    """Direct child nodes, in declaration order."""
    if isinstance(node, InterfaceNode):
        return list(node.super_types) + [m.ast for m in node.members if m.ast is not None]
    if isinstance(node, ArrayNode):
        return [node.element] if node.element is not None else []
    if isinstance(node, TupleNode):
        result = list(node.elements)
        if node.spread is not None:
            result.append(node.spread)
        return result
    if isinstance(node, (UnionNode, IntersectionNode)):
        return list(node.members)
    if isinstance(node, EnumNode):
        return list(node.members)
    return []
