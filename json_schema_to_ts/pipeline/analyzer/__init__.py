"""
Pre-passes run on a raw schema before parsing.

- Normalizer: canonicalizes shorthand forms
- ReferenceResolver: inlines $ref markers
"""

from __future__ import annotations

from .normalizer import Normalizer
from .reference_resolver import ReferenceResolver, read_json_file

__all__ = [
    "Normalizer",
    "ReferenceResolver",
    "read_json_file",
]
