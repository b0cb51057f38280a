"""
Utility functions for the JSON Schema to TypeScript generator.
"""

import json
import re
from typing import Any

# Characters that cannot appear in a TypeScript identifier
_UNSAFE_PATTERN = re.compile(r"(^\s*[^a-zA-Z_$])|([^a-zA-Z_$\d])")
_LEADING_UNDERSCORE_PATTERN = re.compile(r"^_[a-z]")
_UNDERSCORE_PATTERN = re.compile(r"_[a-z]")
_DIGIT_PREFIX_PATTERN = re.compile(r"([\d$]+[a-zA-Z])")
_SPACE_WORD_PATTERN = re.compile(r"\s+([a-zA-Z])")
_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_$][\w$]*")


def _replace_unsafe_characters(text: str) -> str:
    """Replace characters that are not allowed in identifiers with spaces."""
    return _UNSAFE_PATTERN.sub(" ", text)


def _camel_case_boundaries(text: str) -> str:
    """Turn underscore, digit and space boundaries into camelCase humps."""
    text = _LEADING_UNDERSCORE_PATTERN.sub(lambda m: m.group(0).upper(), text)
    text = _UNDERSCORE_PATTERN.sub(lambda m: m.group(0)[1:].upper(), text)
    text = _DIGIT_PREFIX_PATTERN.sub(lambda m: m.group(0).upper(), text)
    text = _SPACE_WORD_PATTERN.sub(lambda m: m.group(0).strip().upper(), text)
    return re.sub(r"\s", "", text)


def to_safe_string(text: str) -> str:
    """Convert a schema name into a PascalCase TypeScript identifier.

    Examples:
        "all_of" -> "AllOf"
        "Person" -> "Person"
        "person.json" -> "PersonJson"
        "Shape_circle" -> "ShapeCircle"
        "HTTPServer" -> "HTTPServer"

    Args:
        text: The name to convert (title, id, definition key, ...)

    Returns:
        A name usable as a TypeScript type identifier
    """
    if not text:
        return ""
    safe = _camel_case_boundaries(_replace_unsafe_characters(text))
    return safe[:1].upper() + safe[1:]


def escape_key_name(key_name: str) -> str:
    """Quote a member key when it is not a valid identifier."""
    if _IDENTIFIER_PATTERN.fullmatch(key_name):
        return key_name
    return json.dumps(key_name)


def render_literal(value: Any) -> str:
    """Render a JSON value as a TypeScript literal."""
    return json.dumps(value, ensure_ascii=False)
