"""
Reference resolver for $ref resolution.

Replaces every `$ref` of a schema graph by the schema it points to. References
to the same target resolve to the same dictionary, so recursive schemas become
cyclic object graphs instead of being expanded.

Supported forms:
    #/definitions/Name           local JSON pointer (any pointer is accepted)
    other.json                   whole file, relative to the referencing file
    other.json#/definitions/X    pointer into another file

A `$ref` with sibling keywords is merged over a copy of its target, the
siblings taking precedence.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from ..errors import ResolverError

logger = logging.getLogger(__name__)

# Keywords holding JSON data rather than sub-schemas
_DATA_KEYWORDS = frozenset({"enum", "default", "const", "examples"})

# Key of the in-memory root document
ROOT_DOCUMENT = ""


def read_json_file(path: Path) -> dict[str, Any]:
    """Default reader: load a schema file from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ResolverError(f"Cannot read referenced schema '{path}': {e}") from e


class ReferenceResolver:
    """Inlines `$ref` markers of a schema graph."""

    def __init__(self, cwd: str | Path | None = None, reader: Callable[[Path], dict[str, Any]] | None = None):
        """
        Initialize the resolver.

        Args:
            cwd: Directory relative file references of the root schema are resolved from
            reader: Function loading a schema file (defaults to reading JSON from disk)
        """
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.reader = reader or read_json_file

    def dereference(self, schema: dict[str, Any]) -> dict[str, Any]:
        """
        Return a copy of a schema with every reference resolved.

        Args:
            schema: The schema to dereference

        Returns:
            The dereferenced schema, possibly containing identity cycles

        Raises:
            ResolverError: A reference cannot be resolved
        """
        root = copy.deepcopy(schema)
        self._documents: dict[str, Any] = {ROOT_DOCUMENT: root}
        self._visited: set[int] = set()
        self._resolving: set[tuple[str, str]] = set()
        return self._resolve_node(root, ROOT_DOCUMENT)

    def _resolve_node(self, node: Any, document: str) -> Any:
        if isinstance(node, list):
            if id(node) not in self._visited:
                self._visited.add(id(node))
                for index, item in enumerate(node):
                    node[index] = self._resolve_node(item, document)
            return node
        if not isinstance(node, dict):
            return node
        if isinstance(node.get("$ref"), str):
            return self._resolve_ref(node, document)
        if id(node) in self._visited:
            return node
        self._visited.add(id(node))
        for key, value in list(node.items()):
            if key not in _DATA_KEYWORDS:
                node[key] = self._resolve_node(value, document)
        return node

    def _resolve_ref(self, node: dict[str, Any], document: str) -> Any:
        ref = node["$ref"]
        if (document, ref) in self._resolving:
            raise ResolverError(f"Circular $ref chain through '{ref}'")
        logger.debug("Resolving $ref '%s'", ref)

        self._resolving.add((document, ref))
        try:
            target, target_document = self._lookup(ref, document)
            resolved = self._resolve_node(target, target_document)
        finally:
            self._resolving.discard((document, ref))

        siblings = {k: v for k, v in node.items() if k != "$ref"}
        if not siblings:
            return resolved
        if not isinstance(resolved, dict):
            raise ResolverError(f"Cannot extend non-object reference target '{ref}'")
        merged = dict(resolved)
        merged.update(siblings)
        return self._resolve_node(merged, document)

    def _lookup(self, ref: str, document: str) -> tuple[Any, str]:
        file_part, _, pointer = ref.partition("#")
        if file_part:
            if "://" in file_part:
                raise ResolverError(f"Unsupported remote reference '{ref}'")
            base = Path(document).parent if document else self.cwd
            path = (base / file_part).resolve()
            document = str(path)
            if document not in self._documents:
                logger.debug("Loading referenced schema %s", path)
                self._documents[document] = self.reader(path)
        return self._follow_pointer(self._documents[document], pointer, ref, document), document

    def _follow_pointer(self, doc: Any, pointer: str, ref: str, document: str) -> Any:
        current = doc
        for raw_token in pointer.split("/")[1:] if pointer else []:
            token = unquote(raw_token).replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and isinstance(current.get("$ref"), str):
                current = self._resolve_node(current, document)
            if isinstance(current, dict) and token in current:
                current = current[token]
            elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
                current = current[int(token)]
            else:
                raise ResolverError(f"Cannot resolve reference '{ref}': no '{token}' in target")
        return current
