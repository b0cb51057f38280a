"""
Errors raised while compiling a schema.

Every error aborts the whole compilation: there is no partial output.
"""

from __future__ import annotations


class CompileError(Exception):
    """Base class for all compilation failures.

    Attributes:
        message: Human readable description of the problem
        key_name: Member key under which the offending schema node was reached
        type_name: Name of the type containing the offending node
    """

    def __init__(self, message: str, key_name: str | None = None, type_name: str | None = None):
        self.message = message
        self.key_name = key_name
        self.type_name = type_name
        super().__init__(self._describe())

    def _describe(self) -> str:
        location = []
        if self.key_name is not None:
            location.append(f"key '{self.key_name}'")
        if self.type_name is not None:
            location.append(f"type '{self.type_name}'")
        if not location:
            return self.message
        return f"{self.message} (at {' in '.join(location)})"

    def at(self, key_name: str | None, type_name: str | None) -> CompileError:
        """Return a copy of this error located at the given member, keeping known fields."""
        return type(self)(
            self.message,
            key_name=self.key_name if self.key_name is not None else key_name,
            type_name=self.type_name if self.type_name is not None else type_name,
        )


class ShapeError(CompileError):
    """A schema node cannot be classified into a shape category."""


class DefaultValueError(CompileError):
    """A member default is missing or incompatible with the member type."""


class NamingError(CompileError):
    """A node needs a standalone name and none could be resolved or synthesized."""


class GenerationError(CompileError):
    """An AST invariant is violated while rendering code."""


class ResolverError(CompileError):
    """A $ref could not be resolved."""


class OutputValidationError(CompileError):
    """Generated code failed the sanity checks run before writing it."""


class SchemaValidationError(CompileError):
    """Structural validation rules failed.

    Carries every violation found in the schema graph so that they can be
    reported together.
    """

    def __init__(self, errors: list[str], key_name: str | None = None, type_name: str | None = None):
        self.errors = list(errors)
        message = f"Schema validation failed with {len(self.errors)} error(s):\n" + "\n".join(self.errors)
        super().__init__(message, key_name=key_name, type_name=type_name)

    def at(self, key_name: str | None, type_name: str | None) -> SchemaValidationError:
        return SchemaValidationError(self.errors, key_name=key_name, type_name=type_name)
