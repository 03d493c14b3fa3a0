"""Entry point for ``python -m pyscout``."""

from .cli.main import main

if __name__ == "__main__":
    main()
