"""
CLI entry point for pyscout.

This module serves as the entry point when pyscout.cli is executed as a module
with `python -m pyscout.cli`.
"""

from .main import main

if __name__ == "__main__":
    main()
