"""CLI output for Stencil commands.

Results go to stdout and errors to stderr. With ``--json`` both are JSON
documents; error documents carry ``StencilError.to_json_error()`` under
``details``.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from stencil.core.exceptions import StencilError


def _dumps(data: Any, indent: int) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


class OutputFormatter:
    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def emit(self, payload: Dict[str, Any], text: str, *, end: str = "\n") -> None:
        """Print ``payload`` in JSON mode, otherwise ``text`` verbatim."""
        if self.json_mode:
            self.json_output(payload)
        else:
            self.text(text, end=end)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        msg = message or str(error)
        if not self.json_mode:
            print(f"Error: {msg}", file=sys.stderr)
            return
        output: Dict[str, Any] = {"error": error_code, "message": msg}
        if isinstance(error, StencilError):
            output["details"] = error.to_json_error()
        print(_dumps(output, self.indent), file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(_dumps(data, self.indent))

    def text(self, message: str, *, end: str = "\n") -> None:
        print(message, end=end)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Print an indented ``key: value`` line (text mode only)."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = ["OutputFormatter"]
