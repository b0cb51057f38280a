"""
Code generation backends.
"""

from .base import CodeBackend
from .typescript_backend import TypeScriptBackend

__all__ = ["CodeBackend", "TypeScriptBackend"]
