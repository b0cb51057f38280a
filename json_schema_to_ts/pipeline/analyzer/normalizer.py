"""
Schema normalization.

Rewrites shorthand schema forms into the canonical shape expected by the
parser. The input is never modified: normalization works on a deep copy.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_TYPE_SEPARATOR = re.compile(r"\s*,\s*")

# Keywords whose value is a single sub-schema
_SCHEMA_KEYWORDS = ("items", "additionalItems", "additionalProperties", "not", "extends")

# Keywords whose value is a list of sub-schemas
_SCHEMA_LIST_KEYWORDS = ("allOf", "anyOf", "oneOf", "items", "extends")

# Keywords whose value maps names to sub-schemas
_SCHEMA_MAP_KEYWORDS = ("properties", "patternProperties", "definitions", "$defs")


class Normalizer:
    """Canonicalizes shorthand schema forms."""

    def normalize(self, schema: dict[str, Any]) -> dict[str, Any]:
        """
        Return a normalized copy of a schema.

        Rules applied to every schema node:
            - "number, null" type strings become ["number", "null"]
            - one-element type lists become a plain string
            - tuples get minItems 0 when it is missing
            - `type: array` with bounds but no items becomes a tuple of `{}`
              items, open-ended (additionalItems true) when there is no maxItems

        Args:
            schema: The raw schema

        Returns:
            The normalized schema
        """
        normalized = copy.deepcopy(schema)
        seen: set[int] = set()
        stack = [normalized]
        while stack:
            node = stack.pop()
            if not isinstance(node, dict) or id(node) in seen:
                continue
            seen.add(id(node))
            self._normalize_node(node)
            stack.extend(self._sub_schemas(node))
        return normalized

    def _sub_schemas(self, node: dict[str, Any]) -> list[Any]:
        result = []
        for keyword in _SCHEMA_KEYWORDS:
            if isinstance(node.get(keyword), dict):
                result.append(node[keyword])
        for keyword in _SCHEMA_LIST_KEYWORDS:
            if isinstance(node.get(keyword), list):
                result.extend(node[keyword])
        for keyword in _SCHEMA_MAP_KEYWORDS:
            if isinstance(node.get(keyword), dict):
                result.extend(node[keyword].values())
        return result

    def _normalize_node(self, node: dict[str, Any]) -> None:
        self._normalize_type(node)
        self._normalize_untyped_array(node)
        if isinstance(node.get("items"), list):
            node.setdefault("minItems", 0)

    def _normalize_type(self, node: dict[str, Any]) -> None:
        node_type = node.get("type")
        if isinstance(node_type, str) and "," in node_type:
            node_type = [t for t in _TYPE_SEPARATOR.split(node_type.strip()) if t]
        if isinstance(node_type, list) and len(node_type) == 1:
            node_type = node_type[0]
        if node_type is not None and node_type != node["type"]:
            logger.debug("Normalized type %r to %r", node["type"], node_type)
            node["type"] = node_type

    def _normalize_untyped_array(self, node: dict[str, Any]) -> None:
        if node.get("type") != "array" or "items" in node:
            return
        min_items = node.get("minItems", 0)
        max_items = node.get("maxItems")
        if min_items <= 0 and max_items is None:
            return
        length = max(max_items if max_items is not None else 0, min_items)
        node["items"] = [{} for _ in range(length)]
        node["minItems"] = min_items
        if max_items is None:
            node["additionalItems"] = True
