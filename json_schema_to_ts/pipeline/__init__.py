"""
Pipeline - JSON Schema to TypeScript generator.

This module provides a multi-phase architecture for generating TypeScript
from JSON schemas:

1. Pre-passes (Analyzer): normalize shorthand forms and resolve $ref
2. Validation: structural rules, all violations reported together
3. Parser: build an AST from the schema graph, cycle safe
4. Backend: render type declarations and factory functions
5. Formatter: optional post-processing with prettier
6. Writer: atomic write of the output file
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig
from .errors import (
    CompileError,
    DefaultValueError,
    GenerationError,
    NamingError,
    OutputValidationError,
    ResolverError,
    SchemaValidationError,
    ShapeError,
)
from .generator import PipelineGenerator, compile_schema
from .writer import AtomicWriter

__all__ = [
    "PipelineGenerator",
    "compile_schema",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "CompileError",
    "ShapeError",
    "DefaultValueError",
    "NamingError",
    "GenerationError",
    "ResolverError",
    "SchemaValidationError",
    "OutputValidationError",
    "AtomicWriter",
]
