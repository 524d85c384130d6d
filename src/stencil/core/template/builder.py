"""Mutable accumulator that produces immutable Templates.

The builder keeps a pending segment list and a keyword -> positions index.
Consecutive ``append`` calls coalesce into one literal segment; ``reserve``
always opens a new placeholder segment.

A builder is single-owner and is consumed by ``build()``. Any further call
raises ``BuilderConsumedError``.
"""
from __future__ import annotations

import logging
import warnings
from typing import Dict, List, Optional, Union

from stencil.core.exceptions import BuilderConsumedError

from .template import Template
from .tokenizer import LiteralToken, tokenize

logger = logging.getLogger(__name__)


class TemplateBuilder:
    """Accumulate literals and placeholders, then ``build()`` a Template.

    Example:
        >>> t = (
        ...     TemplateBuilder()
        ...     .append("Lorem ipsum ")
        ...     .reserve("dolor", "sit")
        ...     .append(" amet.")
        ...     .build()
        ... )
        >>> t.process({"dolor": "DOLOR"})
        'Lorem ipsum DOLOR amet.'
    """

    def __init__(self) -> None:
        self._segments: List[Optional[str]] = []
        self._index: Dict[str, List[int]] = {}
        self._literal_open = False
        self._built = False

    def __len__(self) -> int:
        return len(self._segments)

    def _ensure_open(self, operation: str) -> None:
        if self._built:
            raise BuilderConsumedError(
                f"TemplateBuilder.{operation}() called after build()",
                context={"operation": operation, "segments": len(self._segments)},
            )

    def append(self, text: str) -> "TemplateBuilder":
        """Append literal text, extending the previous literal if there is one."""
        self._ensure_open("append")
        if self._literal_open:
            self._segments[-1] = (self._segments[-1] or "") + text
        else:
            self._segments.append(text)
            self._literal_open = True
        return self

    def reserve(self, keyword: str, default: Optional[str] = None) -> "TemplateBuilder":
        """Reserve a placeholder segment for ``keyword``.

        Args:
            keyword: Keyword used to look up the replacement value
            default: Text rendered when no replacement is supplied
        """
        self._ensure_open("reserve")
        self._literal_open = False
        self._segments.append(default)
        self._index.setdefault(keyword, []).append(len(self._segments) - 1)
        return self

    def append_template(self, source: Union[str, Template]) -> "TemplateBuilder":
        """Append raw template text or compose an already-built Template.

        Raw text is tokenized and replayed as ``append``/``reserve`` calls.
        A Template's segments are replayed in order under their original
        keywords, so positions end up relative to this builder.
        """
        self._ensure_open("append_template")
        if isinstance(source, Template):
            for position, value in enumerate(source.segments):
                keyword = source.keyword_at(position)
                if keyword is None:
                    self.append(value or "")
                else:
                    self.reserve(keyword, value)
            return self

        for token in tokenize(source):
            if isinstance(token, LiteralToken):
                self.append(token.text)
            else:
                self.reserve(token.keyword, token.default)
        return self

    def format(self, source: Union[str, Template]) -> "TemplateBuilder":
        """Deprecated alias of ``append_template``."""
        warnings.warn(
            "TemplateBuilder.format() is deprecated; use append_template()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.append_template(source)

    def build(self) -> Template:
        """Freeze the accumulated segments into a Template and spend the builder."""
        self._ensure_open("build")
        self._built = True
        template = Template(
            segments=tuple(self._segments),
            index={keyword: tuple(positions) for keyword, positions in self._index.items()},
        )
        logger.debug(
            "Built template: %d segments, %d keywords, %d placeholders",
            len(template.segments),
            len(template.index),
            template.placeholder_count,
        )
        return template


__all__ = ["TemplateBuilder"]
