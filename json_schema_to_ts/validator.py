"""
Structural validation of JSON schemas.

Runs every validation rule over every node of a schema graph and collects
all violations, so that a schema author sees every problem at once.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .pipeline.errors import SchemaValidationError
from .validation_rules import ValidationRule, default_rules

logger = logging.getLogger(__name__)

# Key reported for the root node of a schema
ROOT_KEY = "#"


def iter_schema_nodes(schema: Any) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    Yield every dictionary of a schema graph with the key it was reached under.

    Each node is yielded once, even when the graph is shared or cyclic.
    """
    seen = set()
    stack: List[Tuple[str, Any]] = [(ROOT_KEY, schema)]
    while stack:
        key, node = stack.pop()
        if isinstance(node, (dict, list)):
            if id(node) in seen:
                continue
            seen.add(id(node))
        if isinstance(node, dict):
            yield key, node
            stack.extend(reversed([(str(k), v) for k, v in node.items()]))
        elif isinstance(node, list):
            stack.extend(reversed([(str(i), v) for i, v in enumerate(node)]))


class SchemaValidator:
    """Validate a schema against a set of structural rules"""

    def __init__(self, rules: Optional[List[ValidationRule]] = None):
        """
        Initialize the validator.

        Args:
            rules: Rules to check (defaults to all built-in rules)
        """
        self.rules = default_rules() if rules is None else rules

    def validate(self, schema: Dict[str, Any], filename: str) -> List[str]:
        """
        Check every node of a schema against every rule.

        Args:
            schema: The schema to validate
            filename: Name of the schema file, used in error messages

        Returns:
            List of error messages, empty when the schema is valid
        """
        errors = []
        for rule in self.rules:
            for key, node in iter_schema_nodes(schema):
                if rule.is_violated_by(node):
                    errors.append(f'Error at key "{key}" in file "{filename}": {rule.description}')
        for error in errors:
            logger.debug(error)
        return errors

    def check(self, schema: Dict[str, Any], filename: str) -> None:
        """
        Validate a schema and raise if any rule is violated.

        Raises:
            SchemaValidationError: Carrying every violation found
        """
        errors = self.validate(schema, filename)
        if errors:
            raise SchemaValidationError(errors)
