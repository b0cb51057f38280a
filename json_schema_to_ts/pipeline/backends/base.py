"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ...utils import escape_key_name, to_safe_string
from ..config import CodeGeneratorConfig
from ..schema_ast.nodes import AstNode


def jsdoc(text: str | None) -> str:
    """Render a description as a JSDoc block."""
    if not text:
        return ""
    lines = text.replace("*/", "*\\/").strip().splitlines()
    if len(lines) == 1:
        return f"/** {lines[0]} */"
    body = "\n".join(f" * {line}".rstrip() for line in lines)
    return f"/**\n{body}\n */"


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Line comment prefix of the language
    COMMENT_PREFIX: str = "//"

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=False,
        )
        # Add custom filters
        self.jinja_env.filters["safe_name"] = to_safe_string
        self.jinja_env.filters["escape_key"] = escape_key_name
        self.jinja_env.filters["jsdoc"] = jsdoc

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.type_alias_template = self.jinja_env.get_template(f"type_alias.{self.FILE_EXTENSION}.jinja2")
        self.interface_template = self.jinja_env.get_template(f"interface.{self.FILE_EXTENSION}.jinja2")
        self.factory_template = self.jinja_env.get_template(f"factory.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def generate(self, root: AstNode, generation_comment: str = "") -> str:
        """
        Generate code from an AST.

        Args:
            root: Root of the AST
            generation_comment: Text of the comment placed at the top of the file

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def render_type(self, ast: AstNode) -> str:
        """
        Render the type expression used to refer to an AST node.

        Args:
            ast: The AST node

        Returns:
            Language-specific type string
        """
