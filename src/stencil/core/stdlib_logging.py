from __future__ import annotations

import logging
import sys
from pathlib import Path

from stencil.core.utils.io import ensure_directory

_CONFIGURED_LOG_PATH: str | None = None
_STENCIL_FILE_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Send stdlib logging to ``log_path`` only (no stderr handler).

    Idempotent per-process: if already configured for the same file, no-op.
    """
    global _CONFIGURED_LOG_PATH, _STENCIL_FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _STENCIL_FILE_HANDLER is not None:
        return

    ensure_directory(Path(resolved).parent)

    root = logging.getLogger()
    root.setLevel(level_from_name(level))

    # FileHandler is also a StreamHandler: only drop the stdout/stderr ones.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            h.close()

    if _STENCIL_FILE_HANDLER is not None:
        root.removeHandler(_STENCIL_FILE_HANDLER)
        _STENCIL_FILE_HANDLER.close()
        _STENCIL_FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    _STENCIL_FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handlers installed by this module."""
    global _CONFIGURED_LOG_PATH, _STENCIL_FILE_HANDLER, _JSON_MODE_NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    for h in list(root.handlers):
        if h is _STENCIL_FILE_HANDLER or (
            _JSON_MODE_NULL_HANDLER_INSTALLED and type(h) is logging.NullHandler
        ):
            root.removeHandler(h)
            h.close()
    _CONFIGURED_LOG_PATH = None
    _STENCIL_FILE_HANDLER = None
    _JSON_MODE_NULL_HANDLER_INSTALLED = False


def suppress_lastresort_in_json_mode() -> None:
    """Keep logging's implicit ``lastResort`` handler off stderr in ``--json`` mode.

    Installs a NullHandler on the root logger when it has no handlers.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = [
    "configure_stdlib_logging",
    "level_from_name",
    "reset_stdlib_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
