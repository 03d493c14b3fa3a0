"""
Shared test fixtures for pyscout tests.

Fixtures build small directory trees under ``tmp_path``; nothing outside the
temporary directory is read.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pyscout.utils import logging_config

NOTES_TXT = "TODO fix\nok\nTODO again\n"

MAIN_RS = """fn main() {
    // TODO: handle errors
    println!("hello");
}
"""

LIB_PY = """def answer():
    return 42  # TODO later
"""

ROOT_GITIGNORE = """# build output
*.log
!important.log
target/
"""


def write(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Give every test a fresh global logger bound to the current stderr."""
    logging_config._global_logger = None
    yield
    logging_config._global_logger = None
    logger = logging.getLogger("pyscout")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def write_file():
    """Create a file (and its parents) with text or bytes content."""
    return write


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    A small project:

        project/
          .gitignore          *.log, !important.log, target/
          notes.txt           TODO on lines 1 and 3
          src/main.rs         TODO on line 2
          src/lib.py          TODO on line 2
          logs/debug.log      ignored
          logs/important.log  re-included
          target/build.rs     ignored directory
          .hidden/secret.txt  hidden
    """
    root = tmp_path / "project"
    write(root / ".gitignore", ROOT_GITIGNORE)
    write(root / "notes.txt", NOTES_TXT)
    write(root / "src" / "main.rs", MAIN_RS)
    write(root / "src" / "lib.py", LIB_PY)
    write(root / "logs" / "debug.log", "TODO in debug log\n")
    write(root / "logs" / "important.log", "TODO in important log\n")
    write(root / "target" / "build.rs", "// TODO generated\n")
    write(root / ".hidden" / "secret.txt", "TODO hidden\n")
    return root


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
