"""
Command-line interface for pyscout.
"""

from .main import main

__all__ = [
    "main",
]
