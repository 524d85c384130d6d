"""Template compiler for Stencil.

- tokenizer: escape-aware scanning of ``${keyword:default}`` markers
- builder: mutable accumulator with literal coalescing and composition
- template: immutable compiled template (``process`` and ``serialize``)
"""
from __future__ import annotations

from .builder import TemplateBuilder
from .template import UNSET_TEXT, Template
from .tokenizer import (
    LiteralToken,
    Marker,
    PlaceholderToken,
    Token,
    escape_content,
    escape_literal,
    iter_markers,
    split_content,
    tokenize,
)


def compile(source: str) -> Template:
    """Compile raw template text into a Template."""
    return Template.from_string(source)


__all__ = [
    "Template",
    "TemplateBuilder",
    "UNSET_TEXT",
    "compile",
    "LiteralToken",
    "PlaceholderToken",
    "Token",
    "Marker",
    "iter_markers",
    "split_content",
    "tokenize",
    "escape_literal",
    "escape_content",
]
