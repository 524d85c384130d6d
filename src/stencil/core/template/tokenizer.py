"""Escape-aware tokenizer for ``${keyword:default}`` markers.

Grammar:
- A marker is ``${`` CONTENT ``}``. CONTENT runs to the first unescaped ``}``;
  inside it ``\\}`` stands for ``}`` and ``\\\\`` for a single backslash.
- Everything before the first colon of CONTENT is the keyword. When a colon
  is present the second colon-delimited field is the default value; further
  fields are dropped (``${a:b:c}`` -> keyword ``a``, default ``b``).
- A run of backslashes may precede ``${``. An even run (including none)
  leaves the marker live and is emitted unchanged as literal text. An odd
  run escapes the marker: one backslash is dropped and the rest, followed by
  the raw marker text, is literal.
- Lone braces and an unterminated ``${...`` are literal text.

All functions here are stateless and total: any ``str`` tokenizes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

MARKER_OPEN = "${"
MARKER_CLOSE = "}"
ESCAPE = "\\"


@dataclass(frozen=True)
class LiteralToken:
    """Literal text, never substituted."""

    text: str


@dataclass(frozen=True)
class PlaceholderToken:
    """A live placeholder with its keyword and optional default."""

    keyword: str
    default: Optional[str] = None


Token = Union[LiteralToken, PlaceholderToken]


@dataclass(frozen=True)
class Marker:
    """One ``${...}`` occurrence located in a piece of text.

    Attributes:
        start: Index of the first backslash preceding the marker (equals
            ``opening`` when there is none)
        opening: Index of the ``$``
        end: Index one past the closing ``}``
        raw: Marker text exactly as written, ``${`` through ``}``
        content: CONTENT with ``\\}`` and ``\\\\`` unescaped
    """

    start: int
    opening: int
    end: int
    raw: str
    content: str

    @property
    def backslashes(self) -> int:
        return self.opening - self.start

    @property
    def escaped(self) -> bool:
        return self.backslashes % 2 == 1


def _scan_content(text: str, pos: int) -> Tuple[int, str]:
    """Scan CONTENT starting at ``pos``.

    Returns:
        (index of the closing brace, unescaped content), or (-1, "") when the
        marker is never closed
    """
    chars = []
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch == ESCAPE and pos + 1 < length and text[pos + 1] in (ESCAPE, MARKER_CLOSE):
            chars.append(text[pos + 1])
            pos += 2
            continue
        if ch == MARKER_CLOSE:
            return pos, "".join(chars)
        chars.append(ch)
        pos += 1
    return -1, ""


def iter_markers(text: str) -> Iterator[Marker]:
    """Yield every marker in ``text``, live or escaped, left to right."""
    pos = 0
    while True:
        opening = text.find(MARKER_OPEN, pos)
        if opening == -1:
            return
        close, content = _scan_content(text, opening + len(MARKER_OPEN))
        if close == -1:
            # Any later "}" would have closed this marker, so nothing follows.
            return
        start = opening
        while start > pos and text[start - 1] == ESCAPE:
            start -= 1
        yield Marker(
            start=start,
            opening=opening,
            end=close + 1,
            raw=text[opening : close + 1],
            content=content,
        )
        pos = close + 1


def split_content(content: str) -> Tuple[str, Optional[str]]:
    """Split marker CONTENT into (keyword, default).

    Only the first two colon-delimited fields are significant; anything after
    a second colon is discarded.
    """
    if ":" not in content:
        return content, None
    fields = content.split(":")
    return fields[0], fields[1]


def tokenize(text: str) -> Iterator[Token]:
    """Tokenize raw template text into literal and placeholder tokens.

    Example:
        >>> list(tokenize("Hi ${name:you}!"))
        [LiteralToken(text='Hi '), PlaceholderToken(keyword='name', default='you'), LiteralToken(text='!')]
    """
    pos = 0
    for marker in iter_markers(text):
        if marker.escaped:
            literal = text[pos : marker.start] + ESCAPE * (marker.backslashes - 1) + marker.raw
            yield LiteralToken(literal)
        else:
            literal = text[pos : marker.opening]
            if literal:
                yield LiteralToken(literal)
            keyword, default = split_content(marker.content)
            yield PlaceholderToken(keyword, default)
        pos = marker.end
    if pos < len(text):
        yield LiteralToken(text[pos:])


def escape_literal(text: str) -> str:
    """Escape every live marker in ``text`` so it re-parses as literal text.

    One backslash is inserted directly before each live ``${``, turning its
    even backslash run odd. Already-escaped markers are left as they are.
    """
    parts = []
    pos = 0
    for marker in iter_markers(text):
        if marker.escaped:
            continue
        parts.append(text[pos : marker.opening])
        parts.append(ESCAPE)
        pos = marker.opening
    parts.append(text[pos:])
    return "".join(parts)


def breaks_following_marker(text: str) -> bool:
    """Return True when a marker written right after ``text`` would not parse as live.

    Two literal endings do this: an odd run of trailing backslashes (the
    marker becomes escaped) and an unterminated ``${`` (the marker is
    swallowed into its content).
    """
    trailing = len(text) - len(text.rstrip(ESCAPE))
    if trailing % 2 == 1:
        return True
    pos = 0
    for marker in iter_markers(text):
        pos = marker.end
    return text.find(MARKER_OPEN, pos) != -1


def escape_content(text: str) -> str:
    """Escape backslashes and closing braces for use inside a marker."""
    return text.replace(ESCAPE, ESCAPE * 2).replace(MARKER_CLOSE, ESCAPE + MARKER_CLOSE)


__all__ = [
    "LiteralToken",
    "PlaceholderToken",
    "Token",
    "Marker",
    "iter_markers",
    "split_content",
    "tokenize",
    "escape_literal",
    "escape_content",
    "breaks_following_marker",
]
