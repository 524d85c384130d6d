import logging
import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'stencil'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from stencil.core.stdlib_logging import reset_stdlib_logging_for_tests


@pytest.fixture(autouse=True)
def _isolate_stencil_state(monkeypatch):
    """Drop leaked STENCIL_* variables and restore logging state after each test."""
    for key in list(os.environ):
        if key.startswith("STENCIL_"):
            monkeypatch.delenv(key, raising=False)
    root_level = logging.getLogger().level
    yield
    reset_stdlib_logging_for_tests()
    logging.getLogger().setLevel(root_level)
    logging.getLogger("stencil").setLevel(logging.NOTSET)


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch) -> Path:
    """An isolated project with an empty .stencil/config directory, used as CWD."""
    root = tmp_path / "project"
    (root / ".stencil" / "config").mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_project_config(project_root: Path):
    """Write ``.stencil/config/<name>`` with the given YAML text."""

    def _write(name: str, text: str) -> Path:
        path = project_root / ".stencil" / "config" / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
