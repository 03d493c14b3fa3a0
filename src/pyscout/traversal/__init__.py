"""
Directory traversal and ignore-rule evaluation.
"""

from .ignore import IgnoreFilter, IgnoreRuleSet
from .walker import FileWalker, iter_files

__all__ = ["IgnoreFilter", "IgnoreRuleSet", "FileWalker", "iter_files"]
