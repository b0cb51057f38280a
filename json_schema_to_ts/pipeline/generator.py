"""
Pipeline generator: orchestrates the whole schema to TypeScript chain.

    raw schema -> Normalizer -> ReferenceResolver
               -> SchemaValidator -> SchemaParser -> TypeScriptBackend
               -> PrettierFormatter (optional)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from ..validator import SchemaValidator
from .analyzer import Normalizer, ReferenceResolver, read_json_file
from .backends import TypeScriptBackend
from .config import CodeGeneratorConfig
from .formatters import PrettierFormatter
from .schema_ast import SchemaParser

logger = logging.getLogger(__name__)


def compile_schema(
    normalized_schema: dict[str, Any],
    root_name: str,
    config: CodeGeneratorConfig | None = None,
    generation_comment: str = "",
    filename: str | None = None,
) -> str:
    """
    Compile a normalized, dereferenced schema into TypeScript.

    Args:
        normalized_schema: Schema graph without `$ref` markers
        root_name: Name of the root type when the schema has no title or id
        config: Code generation configuration
        generation_comment: Comment placed at the top of the output
        filename: Schema file name reported in validation errors

    Returns:
        Unformatted TypeScript source

    Raises:
        CompileError: Compilation failed; nothing is generated
    """
    config = config or CodeGeneratorConfig()
    SchemaValidator().check(normalized_schema, filename or root_name)
    ast = SchemaParser(config).parse(normalized_schema, root_name=root_name)
    return TypeScriptBackend(config).generate(ast, generation_comment)


class PipelineGenerator:
    """Generates TypeScript code from a raw JSON schema."""

    def __init__(
        self,
        class_name: str,
        schema: dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        cwd: str | Path | None = None,
        filename: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            class_name: Name of the root type when the schema has no title or id
            schema: The raw JSON schema
            config: Code generation configuration
            cwd: Directory relative `$ref` files are resolved from
            filename: Schema file name reported in validation errors
        """
        self.class_name = class_name
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.cwd = cwd
        self.filename = filename or class_name
        self.normalizer = Normalizer()
        self.formatter = PrettierFormatter()

    def _read_normalized(self, path: Path) -> dict[str, Any]:
        return self.normalizer.normalize(read_json_file(path))

    def prepare(self) -> dict[str, Any]:
        """Run the pre-passes: normalization then reference resolution."""
        normalized = self.normalizer.normalize(self.schema)
        resolver = ReferenceResolver(self.cwd, reader=self._read_normalized)
        return resolver.dereference(normalized)

    def generate(self) -> str:
        """
        Generate TypeScript code.

        Returns:
            Generated code, formatted when the formatter is enabled

        Raises:
            CompileError: Compilation failed; nothing is generated
        """
        logger.info("Compiling schema '%s'", self.filename)
        code = compile_schema(
            self.prepare(),
            self.class_name,
            self.config,
            generation_comment=self.generation_comment(),
            filename=self.filename,
        )
        if self.config.formatter.enabled:
            code = self.formatter.format(code, self.config.formatter)
        return code

    def generation_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        # Reconstruct command line using CLI utilities
        try:
            from ..json_schema_to_ts import json_schema_to_ts as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "json_schema_to_ts"

        return f"Generated by json_schema_to_ts v{__version__} : {command_line}"
