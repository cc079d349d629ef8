"""
MIT License

Evaluation of GenBank feature location expressions.

Supported shapes::

    100..150
    100                               (single base)
    join(1..3,10..12)
    complement(100..150)
    complement(join(1..3,10..12))
    join(complement(1..3),10..12)

``<`` and ``>`` partial markers are ignored. Segments keep the order in which
they appear in the text. A ``complement`` wrapping a ``join`` reverse
complements every segment on its own and keeps the textual order, which is
what existing ``.cds``/``.trn``/``.rrn`` consumers expect.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import LocationError
from .sequence import reverse_complement, subseq

COMPLEMENT = "complement"
JOIN = "join"

_RANGE_RE = re.compile(r"^(\d+)\.\.(\d+)$")
_BASE_RE = re.compile(r"^(\d+)$")
_IGNORED_CHARS = str.maketrans("", "", "<> \t\r\n")


@dataclass(frozen=True)
class Segment:
    """One 1-based inclusive slice of the origin sequence."""

    start: int
    end: int
    reverse: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def extract(self, origin: str) -> str:
        piece = subseq(origin, self.start, self.end)
        return reverse_complement(piece) if self.reverse else piece


@dataclass(frozen=True)
class LocationExpression:
    text: str
    segments: Tuple[Segment, ...]

    @property
    def length(self) -> int:
        return sum(segment.length for segment in self.segments)

    @property
    def start(self) -> int:
        return min(segment.start for segment in self.segments)

    @property
    def end(self) -> int:
        return max(segment.end for segment in self.segments)

    @property
    def strand(self) -> int:
        return -1 if self.segments[0].reverse else 1

    def extract(self, origin: str) -> str:
        """Slice every segment from ``origin`` and concatenate in textual order."""
        return "".join(segment.extract(origin) for segment in self.segments)


def _unwrap(text: str, keyword: str) -> Optional[str]:
    """Return the body of ``keyword(...)`` or None when ``text`` is not wrapped."""
    prefix = f"{keyword}("
    if text.startswith(prefix) and text.endswith(")"):
        return text[len(prefix) : -1]
    return None


def _parse_range(token: str, reverse: bool, source: str) -> Segment:
    match = _RANGE_RE.match(token)
    if match:
        start, end = int(match.group(1)), int(match.group(2))
    else:
        match = _BASE_RE.match(token)
        if not match:
            raise LocationError(f"Unsupported location element '{token}' in '{source}'")
        start = end = int(match.group(1))
    if start < 1 or start > end:
        raise LocationError(f"Invalid location '{start}..{end}' in '{source}'")
    return Segment(start=start, end=end, reverse=reverse)


def parse_location(text: str) -> LocationExpression:
    """Parse a raw location string into its ordered segments."""

    cleaned = text.translate(_IGNORED_CHARS)
    if not cleaned:
        raise LocationError("Empty feature location")

    reverse = False
    body = _unwrap(cleaned, COMPLEMENT)
    if body is not None:
        reverse = True
        cleaned = body
    joined = _unwrap(cleaned, JOIN)
    if joined is not None:
        cleaned = joined

    segments: List[Segment] = []
    for token in cleaned.split(","):
        inner = _unwrap(token, COMPLEMENT)
        if inner is not None:
            if reverse:
                raise LocationError(f"Nested complement is not supported: '{text}'")
            segments.append(_parse_range(inner, True, text))
        else:
            segments.append(_parse_range(token, reverse, text))
    return LocationExpression(text=text, segments=tuple(segments))


def evaluate_location(text: str, origin: str) -> str:
    """Return the spliced feature sequence described by ``text``."""
    return parse_location(text).extract(origin)


__all__ = ["Segment", "LocationExpression", "parse_location", "evaluate_location"]
