"""Compiled, immutable templates.

A Template is a fixed sequence of segments plus a keyword index:

    segments = ("Hello ", None, ", welcome to ", "Stencil", ".")
    index    = {"name": (1,), "product": (3,)}

Literal segments are the positions no keyword owns. Placeholder segments hold
their default value, or ``None`` when the placeholder has no default.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from .tokenizer import breaks_following_marker, escape_content, escape_literal

if TYPE_CHECKING:
    from .builder import TemplateBuilder

# Rendered text of a placeholder that has no default and no replacement.
UNSET_TEXT = "null"


@dataclass(frozen=True)
class Template:
    """Immutable compiled template.

    Instances are produced by ``TemplateBuilder.build()`` and can be shared
    freely across threads: ``process`` works on a private copy of the
    segments on every call.

    Example:
        >>> t = Template.from_string("Lorem ${ipsum:dolor} sit.")
        >>> t.process({})
        'Lorem dolor sit.'
        >>> t.process({"ipsum": "IPSUM"})
        'Lorem IPSUM sit.'
        >>> t.serialize()
        'Lorem ${ipsum:dolor} sit.'
    """

    segments: Tuple[Optional[str], ...]
    index: Mapping[str, Tuple[int, ...]]
    _owners: Tuple[Optional[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frozen_index = MappingProxyType({k: tuple(v) for k, v in self.index.items()})
        owners: List[Optional[str]] = [None] * len(self.segments)
        for keyword, positions in frozen_index.items():
            for position in positions:
                owners[position] = keyword
        object.__setattr__(self, "segments", tuple(self.segments))
        object.__setattr__(self, "index", frozen_index)
        object.__setattr__(self, "_owners", tuple(owners))

    @staticmethod
    def builder() -> "TemplateBuilder":
        """Create a fresh builder."""
        from .builder import TemplateBuilder

        return TemplateBuilder()

    @classmethod
    def from_string(cls, source: str) -> "Template":
        """Compile raw template text."""
        return cls.builder().append_template(source).build()

    @property
    def keywords(self) -> Tuple[str, ...]:
        """Keywords in order of first reservation."""
        return tuple(sorted(self.index, key=lambda k: self.index[k][0]))

    @property
    def placeholder_count(self) -> int:
        return sum(len(positions) for positions in self.index.values())

    def keyword_at(self, position: int) -> Optional[str]:
        """Return the keyword owning ``position``, or None for a literal."""
        return self._owners[position]

    def is_placeholder(self, position: int) -> bool:
        return self._owners[position] is not None

    def process(self, replacements: Mapping[str, Any]) -> str:
        """Render the template.

        Every position reserved under a keyword present in ``replacements``
        receives that keyword's value; other placeholders keep their default.
        Keywords the template does not know are ignored.

        Args:
            replacements: Mapping of keyword to replacement value. Values are
                converted with ``str()``; ``None`` renders as ``UNSET_TEXT``.

        Returns:
            Rendered text. A placeholder without default and without
            replacement renders as ``UNSET_TEXT`` (``"null"``).
        """
        working: List[Optional[str]] = list(self.segments)
        for keyword, value in replacements.items():
            positions = self.index.get(keyword)
            if positions is None:
                continue
            text = None if value is None else str(value)
            for position in positions:
                working[position] = text
        return "".join(UNSET_TEXT if part is None else part for part in working)

    def serialize(self) -> str:
        """Reconstruct template text equivalent to the one that built this.

        Placeholders are written as ``${keyword}`` or ``${keyword:default}``.
        Literal text that would itself parse as a live marker is escaped, so
        compiling the result renders the same output for any replacements
        unless ``serialization_conflicts()`` reports a position. The round
        trip is semantic: backslash counts may differ.
        """
        parts: List[str] = []
        for position, value in enumerate(self.segments):
            keyword = self._owners[position]
            if keyword is None:
                parts.append(escape_literal(value or ""))
            elif value is None:
                parts.append("${" + escape_content(keyword) + "}")
            else:
                parts.append("${" + escape_content(keyword) + ":" + escape_content(value) + "}")
        return "".join(parts)

    def serialization_conflicts(self) -> Tuple[int, ...]:
        """Positions of literals that ``serialize`` cannot write faithfully.

        A literal ending in an odd backslash run or an unterminated ``${``
        changes the placeholder written right after it. Parsed text never
        contains such a literal before a placeholder, but ``append`` and
        composition can produce one.
        """
        return tuple(
            position
            for position in range(len(self.segments) - 1)
            if self._owners[position] is None
            and self._owners[position + 1] is not None
            and breaks_following_marker(self.segments[position] or "")
        )

    def get_template(self) -> str:
        """Alias of ``serialize``."""
        return self.serialize()

    def describe(self) -> List[Dict[str, Any]]:
        """Return one JSON-friendly entry per segment (used by ``stencil inspect``)."""
        entries: List[Dict[str, Any]] = []
        for position, value in enumerate(self.segments):
            keyword = self._owners[position]
            if keyword is None:
                entries.append({"position": position, "kind": "literal", "text": value})
            else:
                entries.append(
                    {"position": position, "kind": "placeholder", "keyword": keyword, "default": value}
                )
        return entries

    def __len__(self) -> int:
        return len(self.segments)

    def __hash__(self) -> int:
        return hash((self.segments, tuple(sorted(self.index.items()))))


__all__ = ["Template", "UNSET_TEXT"]
