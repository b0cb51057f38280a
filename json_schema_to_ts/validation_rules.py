"""
Structural validation rules for JSON schemas.

Each rule checks one constraint on a single schema node. Rules never look at
the children of the node: the validator walks the graph and applies every
rule to every node.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class ValidationRule(ABC):
    """Base class for all validation rules"""

    # Human readable statement of the constraint, used in error messages
    description: str = ""

    @abstractmethod
    def check(self, schema: Dict[str, Any]) -> Optional[bool]:
        """
        Check a schema node against this rule.

        Args:
            schema: The schema node to check

        Returns:
            False when the node violates the rule, True when it satisfies it,
            None when the rule does not apply to the node
        """

    def is_violated_by(self, schema: Dict[str, Any]) -> bool:
        return self.check(schema) is False


def _number(schema: Dict[str, Any], key: str) -> Optional[float]:
    value = schema.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


class MaxItemsGreaterOrEqualMinItemsRule(ValidationRule):
    """maxItems must not be lower than minItems"""

    description = "When both maxItems and minItems are present, maxItems >= minItems"

    def check(self, schema: Dict[str, Any]) -> Optional[bool]:
        max_items = _number(schema, "maxItems")
        min_items = _number(schema, "minItems")
        if max_items is None or min_items is None:
            return None
        return max_items >= min_items


class NonNegativeMaxItemsRule(ValidationRule):
    """maxItems must not be negative"""

    description = "When maxItems exists, maxItems >= 0"

    def check(self, schema: Dict[str, Any]) -> Optional[bool]:
        max_items = _number(schema, "maxItems")
        if max_items is None:
            return None
        return max_items >= 0


class NonNegativeMinItemsRule(ValidationRule):
    """minItems must not be negative"""

    description = "When minItems exists, minItems >= 0"

    def check(self, schema: Dict[str, Any]) -> Optional[bool]:
        min_items = _number(schema, "minItems")
        if min_items is None:
            return None
        return min_items >= 0


def default_rules() -> List[ValidationRule]:
    """The rules run on every schema before compilation."""
    return [
        MaxItemsGreaterOrEqualMinItemsRule(),
        NonNegativeMaxItemsRule(),
        NonNegativeMinItemsRule(),
    ]
