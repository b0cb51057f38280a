"""
Schema AST (Abstract Syntax Tree) module.

Contains the shape classifier, the AST node definitions and the parser.
"""

from __future__ import annotations

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
from .parser import SchemaParser

__all__ = [
    "SchemaShape",
    "classify",
    "is_nullable",
    "AstKind",
    "AstNode",
    "PrimitiveNode",
    "LiteralNode",
    "ReferenceNode",
    "InterfaceMember",
    "InterfaceNode",
    "ArrayNode",
    "TupleNode",
    "UnionNode",
    "IntersectionNode",
    "EnumNode",
    "SchemaParser",
]
