"""
Configuration for the schema compilation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FormatterConfig:
    """Configuration for the prettier post-processing pass."""

    # Whether formatting is enabled
    enabled: bool = False

    # Maximum line width
    print_width: int = 80

    # Spaces per indentation level
    tab_width: int = 2

    # Terminate statements with semicolons
    semi: bool = True

    # Use single quotes instead of double quotes
    single_quote: bool = False

    # "none", "es5" or "all"
    trailing_comma: str = "none"

    # Print spaces between brackets in object literals
    bracket_spacing: bool = False


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Declare every named type reachable from the root, not only the root itself
    declare_externally_referenced: bool = True

    # Parse schema definitions that are not referenced so their types get declared
    unreachable_definitions: bool = False

    # Prefix of the generated factory functions (makePerson, ...)
    factory_prefix: str = "make"

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "add_generation_comment": self.add_generation_comment,
            "declare_externally_referenced": self.declare_externally_referenced,
            "unreachable_definitions": self.unreachable_definitions,
            "factory_prefix": self.factory_prefix,
            "formatter": {
                "enabled": self.formatter.enabled,
                "print_width": self.formatter.print_width,
                "tab_width": self.formatter.tab_width,
                "semi": self.formatter.semi,
                "single_quote": self.formatter.single_quote,
                "trailing_comma": self.formatter.trailing_comma,
                "bracket_spacing": self.formatter.bracket_spacing,
            },
        }
