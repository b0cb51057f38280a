"""
Prettier formatter for TypeScript code.
"""

from __future__ import annotations

import logging
import subprocess

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class PrettierFormatter(Formatter):
    """Formatter using prettier for TypeScript code.

    Prettier only reflows whitespace: identifiers, literals and operators of
    the generated code are kept as they are.
    """

    def __init__(self, executable: str = "prettier"):
        self.executable = executable
        self._available = None

    def is_available(self) -> bool:
        """Check if prettier is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=10,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def build_command(self, config: FormatterConfig) -> list[str]:
        """Build the prettier command line for a configuration."""
        cmd = [
            self.executable,
            "--stdin-filepath",
            "code.ts",
            "--parser",
            "typescript",
            "--print-width",
            str(config.print_width),
            "--tab-width",
            str(config.tab_width),
            "--trailing-comma",
            config.trailing_comma,
        ]
        if not config.semi:
            cmd.append("--no-semi")
        if config.single_quote:
            cmd.append("--single-quote")
        if not config.bracket_spacing:
            cmd.append("--no-bracket-spacing")
        return cmd

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format TypeScript code using prettier.

        Args:
            code: TypeScript source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the input unchanged when prettier is unavailable or fails
        """
        if not self.is_available():
            logger.warning("prettier is not available, leaving generated code unformatted")
            return code

        try:
            result = subprocess.run(
                self.build_command(config),
                input=code,
                capture_output=True,
                text=True,
                timeout=60,
            )
        except subprocess.SubprocessError as e:
            logger.warning("prettier failed: %s", e)
            return code

        if result.returncode != 0:
            logger.warning("prettier failed: %s", result.stderr.strip())
            return code
        return result.stdout


def format_with_prettier(code: str, print_width: int = 80, tab_width: int = 2) -> str:
    """
    Convenience function to format TypeScript code with prettier.

    Args:
        code: TypeScript source code
        print_width: Maximum line width
        tab_width: Spaces per indentation level

    Returns:
        Formatted code
    """
    formatter = PrettierFormatter()
    config = FormatterConfig(enabled=True, print_width=print_width, tab_width=tab_width)
    return formatter.format(code, config)
