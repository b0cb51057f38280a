"""
Interface of the post-pass formatters run on generated TypeScript.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Rewrites generated TypeScript through an external formatting tool."""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Return the formatted TypeScript source.

        Implementations hand back `code` unchanged when the tool is missing
        or rejects its input.

        Args:
            code: Raw TypeScript emitted by the backend
            config: Print width, quoting and punctuation options

        Returns:
            Formatted TypeScript source
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the external formatter executable can be run."""
