"""
Pattern compilation and per-file scanning.
"""

from .matchers import CompiledPattern, compile_pattern
from .scanner import FileScanner

__all__ = ["CompiledPattern", "compile_pattern", "FileScanner"]
