"""JSON Schema to TypeScript Generator

A Python package for generating TypeScript type declarations and
`make<Name>` factory functions from JSON Schema definitions.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    CompileError,
    FormatterConfig,
    PipelineGenerator,
    compile_schema,
)

__all__ = [
    "PipelineGenerator",
    "compile_schema",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "CompileError",
    "AtomicWriter",
]
