from __future__ import annotations

from typing import Any, Dict, Mapping


class StencilError(Exception):
    """Base exception for Stencil."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class BuilderConsumedError(StencilError, RuntimeError):
    """Raised when a TemplateBuilder is used again after ``build()``."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        StencilError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class TemplateSourceError(StencilError, FileNotFoundError):
    """Raised when a template source file cannot be read."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        StencilError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class ReplacementError(StencilError, ValueError):
    """Raised when replacement values cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        entry: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if source:
            ctx["source"] = source
        if entry:
            ctx["entry"] = entry
        StencilError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class ConfigError(StencilError, ValueError):
    """Raised when configuration files are invalid or violate the schema."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        StencilError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "StencilError",
    "BuilderConsumedError",
    "TemplateSourceError",
    "ReplacementError",
    "ConfigError",
]
