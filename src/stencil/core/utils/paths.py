"""Project root resolution.

Resolution priority:
1. Explicit ``repo_root`` argument
2. ``STENCIL_PROJECT_ROOT`` environment variable
3. Nearest ancestor of the working directory containing ``.stencil`` or ``.git``
4. The working directory itself
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_CONFIG_DIRNAME = ".stencil"
PROJECT_ROOT_ENV = "STENCIL_PROJECT_ROOT"
_ROOT_MARKERS = (PROJECT_CONFIG_DIRNAME, ".git")


def resolve_project_root(repo_root: Optional[Path] = None, *, start: Optional[Path] = None) -> Path:
    if repo_root is not None:
        return Path(repo_root).expanduser().resolve()

    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        return Path(env_root).expanduser().resolve()

    cwd = Path(start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return cwd


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.stencil``."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


__all__ = [
    "PROJECT_CONFIG_DIRNAME",
    "PROJECT_ROOT_ENV",
    "resolve_project_root",
    "get_project_config_dir",
]
