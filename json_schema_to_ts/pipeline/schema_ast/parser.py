"""
JSON Schema parser that builds an AST.

Walks a normalized, fully dereferenced schema graph and produces one AST node
per distinct schema node. The schema graph may share nodes or contain cycles:
a placeholder node is cached before recursing into children so that a node
reached again resolves to the same, possibly still-being-filled, instance.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ...utils import render_literal
from ..config import CodeGeneratorConfig
from ..errors import CompileError, DefaultValueError, NamingError, ShapeError
from .classifier import SchemaShape, classify, is_nullable
from .nodes import (
    ArrayNode,
    AstKind,
    AstNode,
    EnumNode,
    InterfaceMember,
    InterfaceNode,
    IntersectionNode,
    LiteralNode,
    PrimitiveNode,
    ReferenceNode,
    TupleNode,
    UnionNode,
)

logger = logging.getLogger(__name__)

# Separator between the root name and the branch part of a synthesized name
SYNTHESIZED_NAME_SEPARATOR = "_"

_PRIMITIVE_KINDS = {
    SchemaShape.BOOLEAN: AstKind.BOOLEAN,
    SchemaShape.NULL: AstKind.NULL,
    SchemaShape.NUMBER: AstKind.NUMBER,
    SchemaShape.STRING: AstKind.STRING,
    SchemaShape.ANY: AstKind.ANY,
}

_DEFINITION_KEYS = ("definitions", "$defs")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_default(ast: AstNode, value: Any) -> bool:
    """Check that a non-null default value fits the kind of a member's AST."""
    match ast.kind:
        case AstKind.ANY:
            return True
        case AstKind.ARRAY | AstKind.TUPLE:
            return isinstance(value, list) and len(value) == 0
        case AstKind.BOOLEAN:
            return isinstance(value, bool)
        case AstKind.NUMBER:
            return _is_number(value)
        case AstKind.STRING:
            return isinstance(value, str)
        case AstKind.NULL:
            return value is None
        case AstKind.LITERAL:
            return isinstance(value, (str, bool)) or _is_number(value)
        case AstKind.ENUM if isinstance(ast, EnumNode):
            return any(type(m.value) is type(value) and m.value == value for m in ast.members)
        case _:
            # Interfaces, intersections, unions and custom types only take null
            return value is None


def add_note(ast: AstNode, note: str) -> None:
    """Append a paragraph to the description of a node, once."""
    if not ast.comment:
        ast.comment = note
    elif note not in ast.comment:
        ast.comment = f"{ast.comment}\n\n{note}"


def accepts_null(ast: AstNode) -> bool:
    """Whether null is one of the values of an anonymous type."""
    if ast.kind in (AstKind.NULL, AstKind.ANY):
        return True
    return isinstance(ast, UnionNode) and any(m.kind == AstKind.NULL for m in ast.members)


class SchemaParser:
    """Parses a normalized JSON Schema graph into an AST."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        self.config = config or CodeGeneratorConfig()
        self._reset(None, None)

    def _reset(self, root_schema: Any, root_name: str | None) -> None:
        self._root_schema = root_schema
        self._root_name = root_name
        # id(schema) -> (schema, ast); the schema is stored to keep its id stable
        self._processed: dict[int, tuple[Any, AstNode]] = {}
        self._definition_names: dict[int, str] = {}
        self._inferred_required: dict[int, list[str]] = {}
        self._synthesized: dict[str, AstNode] = {}

    def parse(
        self,
        schema: dict[str, Any],
        root_schema: dict[str, Any] | None = None,
        root_name: str | None = None,
    ) -> AstNode:
        """
        Parse a schema node into an AST.

        Args:
            schema: The schema node to parse
            root_schema: Root of the schema graph, used to look up definition names
                (defaults to `schema`)
            root_name: Name of the root node when it has no title or id

        Returns:
            The AST of `schema`

        Raises:
            ShapeError: A node cannot be classified
            DefaultValueError: A member default is missing or does not fit its type
            NamingError: A node needs a name and none can be resolved
        """
        root_schema = schema if root_schema is None else root_schema
        self._reset(root_schema, root_name)
        self._collect_definitions(root_schema, set())
        return self._parse(schema)

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def _collect_definitions(self, node: Any, seen: set[int]) -> None:
        """Map every schema reachable through a definitions map to its key."""
        if id(node) in seen:
            return
        seen.add(id(node))
        if isinstance(node, list):
            for item in node:
                self._collect_definitions(item, seen)
            return
        if not isinstance(node, dict):
            return
        for definitions_key in _DEFINITION_KEYS:
            definitions = node.get(definitions_key)
            if isinstance(definitions, dict):
                for name, definition in definitions.items():
                    if isinstance(definition, dict):
                        self._definition_names.setdefault(id(definition), name)
        for value in node.values():
            self._collect_definitions(value, seen)

    def _standalone_name(self, schema: dict[str, Any]) -> str | None:
        name = schema.get("title") or schema.get("$id") or schema.get("id")
        if name:
            return name
        name = self._definition_names.get(id(schema))
        if name:
            return name
        if schema is self._root_schema:
            return self._root_name
        return None

    def _root_ast_name(self) -> str | None:
        root = self._processed.get(id(self._root_schema))
        return root[1].standalone_name if root else None

    def _synthesize_name(self, root_name: str, suffix: str, ast: AstNode) -> str:
        name = f"{root_name}{SYNTHESIZED_NAME_SEPARATOR}{suffix}"
        owner = self._synthesized.get(name)
        if owner is not None and owner is not ast:
            raise NamingError(f"Synthesized name '{name}' is already used by another alternative")
        self._synthesized[name] = ast
        return name

    def _name_alternative(self, branch: dict[str, Any], ast: AstNode, is_root_union: bool) -> None:
        """Give an anonymous alternative branch a standalone name."""
        if ast.has_standalone_name or ast.kind == AstKind.NULL:
            return
        root_name = self._root_ast_name()
        if not is_root_union or not root_name:
            raise NamingError("Alternative branches must be named")

        if isinstance(ast, InterfaceNode):
            keys = list(branch.get("properties", {}))
            if len(keys) != 1:
                raise ShapeError(
                    f"Anonymous alternative of '{root_name}' must have exactly one property, found {len(keys)}"
                )
            suffix = keys[0]
        elif isinstance(ast, EnumNode):
            suffix = "".join(v if isinstance(v, str) else json.dumps(v) for v in branch.get("enum", []))
        else:
            raise NamingError(f"Cannot synthesize a name for a {ast.kind.value} alternative of '{root_name}'")

        ast.standalone_name = self._synthesize_name(root_name, suffix, ast)
        ast.internal_name = True

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _placeholder(self, shape: SchemaShape, schema: dict[str, Any]) -> AstNode:
        match shape:
            case SchemaShape.ALL_OF:
                return IntersectionNode()
            case SchemaShape.ANY_OF | SchemaShape.ONE_OF:
                return UnionNode()
            case SchemaShape.CUSTOM_TYPE:
                return ReferenceNode(type_name=schema["tsType"])
            case SchemaShape.BOUNDED_ARRAY:
                return TupleNode()
            case SchemaShape.UNBOUNDED_ARRAY:
                return ArrayNode()
            case SchemaShape.ENUM:
                return EnumNode()
            case SchemaShape.NAMED_OBJECT | SchemaShape.UNNAMED_OBJECT:
                return InterfaceNode()
            case SchemaShape.REFERENCE:
                raise ShapeError(f"Unresolved reference '{schema['$ref']}': refs must be resolved before parsing")
            case _:
                return PrimitiveNode(kind=_PRIMITIVE_KINDS[shape])

    def _parse(self, schema: Any, key_name: str | None = None) -> AstNode:
        if schema is True:
            return PrimitiveNode(kind=AstKind.ANY, key_name=key_name)
        if not isinstance(schema, dict):
            raise ShapeError(f"Invalid schema node {schema!r}", key_name=key_name)

        cached = self._processed.get(id(schema))
        if cached is not None:
            logger.debug("Reusing %s node '%s'", cached[1].kind.value, cached[1].standalone_name or key_name)
            return cached[1]

        shape = classify(schema)
        ast = self._placeholder(shape, schema)
        ast.standalone_name = self._standalone_name(schema)
        ast.comment = schema.get("description")
        ast.key_name = key_name
        self._processed[id(schema)] = (schema, ast)
        logger.debug("Parsing %s node '%s'", shape.value, ast.standalone_name or key_name or "")

        match ast:
            case IntersectionNode():
                ast.members = [self._parse(branch) for branch in schema["allOf"]]
            case UnionNode():
                self._fill_union(ast, schema, schema["anyOf"] if shape == SchemaShape.ANY_OF else schema["oneOf"])
            case TupleNode():
                self._fill_tuple(ast, schema)
            case ArrayNode():
                ast.element = self._parse(schema.get("items", {}))
            case EnumNode():
                ast.members = [LiteralNode(value=value) for value in schema["enum"]]
            case InterfaceNode():
                self._fill_interface(ast, schema)
        return ast

    def _fill_union(self, ast: UnionNode, schema: dict[str, Any], branches: list[Any]) -> None:
        is_root_union = schema is self._root_schema
        for branch in branches:
            if isinstance(branch, dict) and "required" not in branch:
                properties = branch.get("properties")
                if isinstance(properties, dict) and len(properties) == 1:
                    # Tagged alternative: the single key is the discriminant
                    self._inferred_required[id(branch)] = list(properties)
            member = self._parse(branch)
            self._name_alternative(branch, member, is_root_union)
            ast.members.append(member)

    def _fill_tuple(self, ast: TupleNode, schema: dict[str, Any]) -> None:
        items = schema["items"]
        ast.min_items = schema.get("minItems", 0)
        ast.max_items = schema.get("maxItems")
        ast.elements = [self._parse(item) for item in items]

        additional_items = schema.get("additionalItems")
        if isinstance(additional_items, dict):
            ast.spread = self._parse(additional_items)
        elif additional_items is True:
            ast.spread = PrimitiveNode(kind=AstKind.ANY)
        elif additional_items is None and ast.max_items is not None and ast.max_items > len(items):
            ast.spread = PrimitiveNode(kind=AstKind.ANY)

    def _required_keys(self, schema: dict[str, Any]) -> list[str]:
        if "required" in schema:
            return list(schema["required"])
        return self._inferred_required.get(id(schema), [])

    def _fill_interface(self, ast: InterfaceNode, schema: dict[str, Any]) -> None:
        type_name = ast.standalone_name
        required = self._required_keys(schema)

        extends = schema.get("extends") or []
        for super_schema in extends if isinstance(extends, list) else [extends]:
            try:
                super_type = self._parse_super_type(super_schema)
            except CompileError as e:
                raise e.at("extends", type_name) from e
            if super_type is ast:
                raise ShapeError("An interface cannot extend itself", key_name="extends", type_name=type_name)
            ast.super_types.append(super_type)

        for key, value in schema.get("properties", {}).items():
            try:
                ast.members.append(self._parse_property(key, value, key in required, type_name))
            except CompileError as e:
                raise e.at(key, type_name) from e

        pattern_properties = schema.get("patternProperties") or {}
        single_pattern = len(pattern_properties) == 1
        for pattern, value in pattern_properties.items():
            try:
                member_ast = self._parse(value, pattern)
            except CompileError as e:
                raise e.at(pattern, type_name) from e
            if type_name:
                add_note(
                    member_ast,
                    f"This interface was referenced by `{type_name}`'s JSON-Schema definition\n"
                    f'via the `patternProperty` "{pattern}".',
                )
            ast.members.append(
                InterfaceMember(
                    key_name=pattern,
                    ast=member_ast,
                    is_required=True,
                    is_pattern_property=not single_pattern,
                    is_index_signature=single_pattern,
                )
            )

        if self.config.unreachable_definitions:
            for definitions_key in _DEFINITION_KEYS:
                for key, value in (schema.get(definitions_key) or {}).items():
                    if not isinstance(value, dict):
                        continue
                    try:
                        member_ast = self._parse(value, key)
                    except CompileError as e:
                        raise e.at(key, type_name) from e
                    if type_name:
                        add_note(
                            member_ast,
                            f"This interface was referenced by `{type_name}`'s JSON-Schema\n"
                            f'via the `definition` "{key}".',
                        )
                    ast.members.append(
                        InterfaceMember(key_name=key, ast=member_ast, is_unreachable_definition=True)
                    )

    def _parse_super_type(self, schema: Any) -> AstNode:
        super_type = self._parse(schema, "extends")
        if not isinstance(super_type, (InterfaceNode, IntersectionNode)):
            raise ShapeError(f"Only object types can be extended, not '{super_type.kind.value}'")
        if not super_type.has_standalone_name:
            raise NamingError("Supertypes must have a standalone name")
        return super_type

    def _parse_property(
        self, key: str, value: Any, is_required: bool, type_name: str | None
    ) -> InterfaceMember:
        has_default = isinstance(value, dict) and "default" in value
        if not is_required and not has_default:
            raise DefaultValueError(
                f"Property {key} in schema {type_name} is not required but has no default. "
                "Optional fields must have a specified default value.",
                key_name=key,
                type_name=type_name,
            )

        member_ast = self._parse(value, key)
        nullable = isinstance(value, dict) and is_nullable(value)
        member = InterfaceMember(key_name=key, ast=member_ast, is_required=is_required, is_nullable=nullable)

        if has_default:
            default = value["default"]
            if default is None:
                accepted = nullable or member_ast.has_standalone_name or accepts_null(member_ast)
            else:
                accepted = nullable or is_valid_default(member_ast, default)
            if not accepted:
                raise DefaultValueError(
                    f"The default of {json.dumps(default)} in schema {type_name} "
                    f"is not a valid default for type {member_ast.kind.value}.",
                    key_name=key,
                    type_name=type_name,
                )
            member.default = render_literal(default)
            member.has_default = True
        return member
