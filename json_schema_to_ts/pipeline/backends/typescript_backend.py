"""
TypeScript code generation backend.

Renders an AST into TypeScript declarations in two passes over the graph:

1. Type pass: every named node that is not an interface becomes
   `export type Name = ...;`. Named intersections are followed by their
   factory function.
2. Interface pass: every named interface becomes `export interface Name {...}`
   followed by its `makeName` factory function.

Each pass tracks visited nodes by identity, so shared and cyclic subgraphs
are walked once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ...utils import escape_key_name, render_literal, to_safe_string
from ..config import CodeGeneratorConfig
from ..errors import CompileError, GenerationError
from ..schema_ast.nodes import (
    ArrayNode,
    AstKind,
    AstNode,
    EnumNode,
    InterfaceMember,
    InterfaceNode,
    IntersectionNode,
    LiteralNode,
    ReferenceNode,
    TupleNode,
    UnionNode,
    children,
)
from .base import CodeBackend

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {
    AstKind.ANY: "any",
    AstKind.BOOLEAN: "boolean",
    AstKind.NULL: "null",
    AstKind.NUMBER: "number",
    AstKind.STRING: "string",
}


def _is_identifier_key(key_name: str) -> bool:
    return escape_key_name(key_name) == key_name


def member_access(target: str, key_name: str) -> str:
    """Property access expression: `input.key` or `input["key"]`."""
    if _is_identifier_key(key_name):
        return f"{target}.{key_name}"
    return f"{target}[{render_literal(key_name)}]"


class TypeScriptBackend(CodeBackend):
    """Generates TypeScript type declarations and factory functions."""

    TEMPLATE_LANG = "ts"
    FILE_EXTENSION = "ts"

    def __init__(self, config: CodeGeneratorConfig | None = None):
        super().__init__(config or CodeGeneratorConfig())
        # Anonymous nodes whose expression is being rendered
        self._rendering: set[int] = set()

    def generate(self, root: AstNode, generation_comment: str = "") -> str:
        """
        Generate TypeScript code from an AST.

        Args:
            root: Root of the AST
            generation_comment: Text of the comment placed at the top of the file

        Returns:
            Generated TypeScript source

        Raises:
            GenerationError: The AST cannot be rendered
        """
        self._root = root
        # name -> declaration rendered without its comment, shared by both passes
        self._declared: dict[str, str] = {}
        blocks: list[str] = []

        self._walk(root, set(), lambda node: self._declare_type(node, blocks))
        self._walk(root, set(), lambda node: self._declare_interface(node, blocks))

        prefix = self.prefix_template.render(
            generation_comment=f"{self.COMMENT_PREFIX} {generation_comment}" if generation_comment else ""
        )
        logger.debug("Generated %d declaration(s)", len(blocks))
        return prefix + "\n\n".join(blocks) + "\n"

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _walk(self, node: AstNode, processed: set[int], visit: Callable[[AstNode], None]) -> None:
        """Pre-order walk over the AST, visiting each node once."""
        stack = [node]
        while stack:
            current = stack.pop()
            if id(current) in processed:
                continue
            processed.add(id(current))
            visit(current)
            stack.extend(reversed(children(current)))

    def _should_declare(self, node: AstNode) -> bool:
        if not node.has_standalone_name:
            return False
        if self.config.declare_externally_referenced:
            return True
        return node is self._root or node.internal_name

    def _emit(self, name: str, text: str, signature: str, blocks: list[str]) -> None:
        """Append a declaration once; a name may only be redeclared with the same signature."""
        previous = self._declared.get(name)
        if previous is None:
            self._declared[name] = signature
            blocks.append(text)
        elif previous != signature:
            raise GenerationError(f"Type '{name}' is declared twice with different definitions", type_name=name)

    def _declare_type(self, node: AstNode, blocks: list[str]) -> None:
        if isinstance(node, InterfaceNode) or not self._should_declare(node):
            return
        name = to_safe_string(node.standalone_name)
        try:
            expression = self._render_expression(node)
            text, signature = (
                self.type_alias_template.render(name=name, comment=comment, expression=expression).strip()
                for comment in (node.comment, None)
            )
            if isinstance(node, IntersectionNode):
                factory = self._render_intersection_factory(node, name)
                text += "\n\n" + factory
                signature += "\n\n" + factory
        except CompileError as e:
            raise e.at(None, name) from e
        self._emit(name, text, signature, blocks)

    def _declare_interface(self, node: AstNode, blocks: list[str]) -> None:
        if not isinstance(node, InterfaceNode) or not self._should_declare(node):
            return
        name = to_safe_string(node.standalone_name)
        try:
            members = self._render_members(node)
            super_types = [to_safe_string(super_type.standalone_name) for super_type in node.super_types]
            declaration, signature = (
                self.interface_template.render(
                    name=name, comment=comment, members=members, super_types=super_types
                ).strip()
                for comment in (node.comment, None)
            )
            factory = self._render_interface_factory(node, name)
        except CompileError as e:
            raise e.at(None, name) from e
        self._emit(name, f"{declaration}\n\n{factory}", f"{signature}\n\n{factory}", blocks)

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def render_type(self, ast: AstNode) -> str:
        """Reference to a node: its name when it has one, its expression otherwise."""
        if ast.has_standalone_name:
            return to_safe_string(ast.standalone_name)
        if id(ast) in self._rendering:
            raise GenerationError(f"Anonymous {ast.kind.value} type refers to itself", key_name=ast.key_name)
        self._rendering.add(id(ast))
        try:
            return self._render_expression(ast)
        finally:
            self._rendering.discard(id(ast))

    def _render_expression(self, ast: AstNode) -> str:
        """Structural type expression of a node, ignoring its own name."""
        if ast.kind in PRIMITIVE_TYPES:
            return PRIMITIVE_TYPES[ast.kind]
        match ast:
            case LiteralNode():
                return self._render_literal(ast)
            case ReferenceNode():
                return ast.type_name
            case InterfaceNode():
                members = self._render_members(ast)
                parts = ["{" + "; ".join(members) + "}"] if members or not ast.super_types else []
                parts.extend(to_safe_string(super_type.standalone_name) for super_type in ast.super_types)
                return " & ".join(parts)
            case ArrayNode():
                return self._render_array(ast)
            case TupleNode():
                return self._render_tuple(ast)
            case UnionNode():
                return self._render_union(ast)
            case IntersectionNode():
                return self._render_intersection(ast)
            case EnumNode():
                return " | ".join(self._render_literal(m) for m in ast.members)
        raise GenerationError(f"Unknown AST kind '{ast.kind.value}'")

    def _render_literal(self, ast: LiteralNode) -> str:
        if not isinstance(ast.value, (str, int, float, bool)):
            raise GenerationError("Enum items must be of type 'string', 'number' or 'boolean'")
        return render_literal(ast.value)

    def _render_element(self, ast: AstNode) -> str:
        rendered = self.render_type(ast)
        if not ast.has_standalone_name and ("|" in rendered or "&" in rendered):
            return f"({rendered})"
        return rendered

    def _render_array(self, ast: ArrayNode) -> str:
        return f"{self._render_element(ast.element)}[]"

    def _render_tuple(self, ast: TupleNode) -> str:
        """
        Render a bounded array.

        With `m` required items out of `n` declared ones, the result is the
        union of every prefix of length `m` to `n`, so that only the lengths
        allowed by the bounds are accepted. A spread slot is appended to the
        longest prefix.
        """
        params = [self.render_type(element) for element in ast.elements]
        min_items = ast.min_items
        if min_items > len(params):
            raise GenerationError(
                f"Minimum tuple length {min_items} is greater than the {len(params)} item(s) defined"
            )
        spread = [f"...{self._render_element(ast.spread)}[]"] if ast.spread is not None else []

        prefixes = []
        for length in range(min_items, len(params) + 1):
            items = params[:length]
            if length == len(params):
                items = items + spread
            prefixes.append("[" + ", ".join(items) + "]")
        return " | ".join(prefixes)

    def _render_union(self, ast: UnionNode) -> str:
        members = []
        for member in ast.members:
            if member.kind == AstKind.NULL:
                members.append("null")
            elif not member.has_standalone_name:
                raise GenerationError("'AnyOf' and 'OneOf' entities can only reference named interfaces.")
            else:
                members.append(to_safe_string(member.standalone_name))
        return " | ".join(sorted(members, key=lambda m: (m == "null", m)))

    def _split_intersection(self, ast: IntersectionNode) -> tuple[list[InterfaceNode], list[AstNode]]:
        own: list[InterfaceNode] = []
        refs: list[AstNode] = []
        for member in ast.members:
            if member.has_standalone_name:
                refs.append(member)
            elif isinstance(member, InterfaceNode):
                own.append(member)
            else:
                raise GenerationError(
                    f"Expected an AST type of 'interface', but received a '{member.kind.value}'"
                )
        refs.extend(super_type for interface in own for super_type in interface.super_types)
        if not own and not refs:
            raise GenerationError("No members")
        return own, refs

    def _render_intersection(self, ast: IntersectionNode) -> str:
        own, refs = self._split_intersection(ast)
        parts = []
        if own:
            members = [line for interface in own for line in self._render_members(interface)]
            parts.append("{" + "; ".join(members) + "}")
        parts.extend(to_safe_string(ref.standalone_name) for ref in refs)
        return " & ".join(parts)

    def _render_members(self, ast: InterfaceNode) -> list[str]:
        return [self._render_member(member) for member in ast.rendered_members()]

    def _render_member(self, member: InterfaceMember) -> str:
        type_text = self.render_type(member.ast)
        if member.is_nullable:
            type_text += " | null"
        if member.is_index_signature:
            return f"[k: string]: {type_text}"
        optional = "" if member.is_required else "?"
        return f"{escape_key_name(member.key_name)}{optional}: {type_text}"

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def _factory_name(self, type_name: str) -> str:
        return f"{self.config.factory_prefix}{type_name}"

    def _has_factory(self, ast: AstNode) -> bool:
        return ast.has_standalone_name and isinstance(ast, (InterfaceNode, IntersectionNode))

    def _initialiser(self, ast: AstNode, access: str) -> str:
        """Expression building a member value from the input value at `access`."""
        if self._has_factory(ast):
            return f"{self._factory_name(to_safe_string(ast.standalone_name))}({access})"
        if isinstance(ast, InterfaceNode) and not ast.has_standalone_name:
            if ast.super_types:
                return self._extended_initialiser(ast, access)
            if ast.rendered_members():
                return "{" + ", ".join(self._interface_assignments(ast, access)) + "}"
        return access

    def _extended_initialiser(self, ast: InterfaceNode, access: str) -> str:
        """Merge the factories of the supertypes with the own members of an interface."""
        sources = [self._initialiser(super_type, access) for super_type in ast.super_types]
        own = self._interface_assignments(ast, access)
        if own:
            sources.append("{" + ", ".join(own) + "}")
        return f"Object.assign({{}}, {', '.join(sources)})"

    def _interface_assignments(self, ast: InterfaceNode, target: str) -> list[str]:
        assignments = []
        members = ast.rendered_members()
        if any(member.is_index_signature for member in members):
            assignments.append(f"...{target}")
        for member in members:
            if member.is_index_signature:
                continue
            assignments.append(self._member_assignment(member, target))
        return assignments

    def _member_assignment(self, member: InterfaceMember, target: str) -> str:
        access = member_access(target, member.key_name)
        value = self._initialiser(member.ast, access)
        if value != access and (member.is_nullable or member.default == "null"):
            value = f"{access} === null ? null : {value}"
        if not member.is_required:
            value = f"{access} === undefined ? {member.default} : {value}"
        return f"{escape_key_name(member.key_name)}: {value}"

    def _render_interface_factory(self, ast: InterfaceNode, name: str) -> str:
        assignments = None if ast.super_types else self._interface_assignments(ast, "input")
        return self.factory_template.render(
            factory_name=self._factory_name(name),
            input_type=self._render_expression(ast),
            name=name,
            assignments=assignments,
            expression=self._extended_initialiser(ast, "input") if ast.super_types else None,
        ).strip()

    def _render_intersection_factory(self, ast: IntersectionNode, name: str) -> str:
        own, refs = self._split_intersection(ast)
        sources = []
        if own:
            assignments = [a for interface in own for a in self._interface_assignments(interface, "input")]
            sources.append("{" + ", ".join(assignments) + "}")
        sources.extend(self._initialiser(ref, "input") for ref in refs)

        if len(sources) == 1 and not own:
            expression = sources[0]
        elif len(sources) == 1:
            expression = f"({sources[0]})"
        elif own:
            expression = f"Object.assign({', '.join(sources)})"
        else:
            expression = f"Object.assign({{}}, {', '.join(sources)})"

        return self.factory_template.render(
            factory_name=self._factory_name(name),
            input_type=self._render_expression(ast),
            name=name,
            assignments=None,
            expression=expression,
        ).strip()
