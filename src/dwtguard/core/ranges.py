# topmark:header:start
#
#   project      : DwtGuard
#   file         : ranges.py
#   file_relpath : src/dwtguard/core/ranges.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Character-offset ranges over an immutable text buffer.

Every structural element produced by the parser is located with a `TextRange`,
a half-open ``[start, end)`` interval of character offsets. `LineIndex` converts
offsets to zero-based ``(line, character)`` positions for human-facing output.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open ``[start, end)`` interval of character offsets.

    Attributes:
        start (int): Offset of the first character in the range.
        end (int): Offset one past the last character in the range.

    Raises:
        ValueError: If ``start`` is negative or greater than ``end``.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"Invalid range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        """Number of characters covered by the range."""
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """Return True if the range covers no characters."""
        return self.start == self.end

    def overlaps(self, other: TextRange) -> bool:
        """Return True if both ranges share at least one character.

        Touching ranges (``a.end == b.start``) do not overlap.

        Args:
            other (TextRange): The range to compare against.

        Returns:
            bool: True if the ranges share a common area.
        """
        if self.end <= other.start:
            return False
        if self.start >= other.end:
            return False
        return True

    def contains(self, other: TextRange) -> bool:
        """Return True if ``other`` lies fully within this range (bounds inclusive).

        An empty range sitting exactly on either boundary is contained, which
        matches how an insertion at the edge of an editable region is treated.

        Args:
            other (TextRange): The candidate inner range.

        Returns:
            bool: True if ``other`` is contained.
        """
        return self.start <= other.start and other.end <= self.end

    def contains_offset(self, offset: int) -> bool:
        """Return True if ``offset`` addresses a character inside the range."""
        return self.start <= offset < self.end

    def shift(self, delta: int) -> TextRange:
        """Return a copy of the range translated by ``delta`` characters."""
        return TextRange(self.start + delta, self.end + delta)

    def slice(self, text: str) -> str:
        """Return the substring of ``text`` covered by the range."""
        return text[self.start : self.end]

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly representation."""
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line/character position in a text buffer."""

    line: int
    character: int


class LineIndex:
    """Offset ↔ position conversion for a single text snapshot.

    Line breaks are ``\\n``; a ``\\r`` preceding it is counted as a character of
    the line it terminates, which keeps offsets identical to the raw buffer.
    """

    def __init__(self, text: str) -> None:
        self._length: int = len(text)
        starts: list[int] = [0]
        pos: int = text.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = text.find("\n", pos + 1)
        self._line_starts: list[int] = starts

    @property
    def line_count(self) -> int:
        """Number of lines in the indexed text (at least 1)."""
        return len(self._line_starts)

    def position_at(self, offset: int) -> Position:
        """Return the position of ``offset``, clamped to the text bounds."""
        offset = max(0, min(offset, self._length))
        line: int = bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])

    def offset_at(self, position: Position) -> int:
        """Return the offset of ``position``, clamped to the text bounds."""
        if position.line < 0:
            return 0
        if position.line >= len(self._line_starts):
            return self._length
        line_start: int = self._line_starts[position.line]
        if position.line + 1 < len(self._line_starts):
            line_end: int = self._line_starts[position.line + 1] - 1
        else:
            line_end = self._length
        return min(line_start + max(0, position.character), line_end)

    def describe(self, rng: TextRange) -> str:
        """Return a human-readable ``L:C-L:C`` description (1-based) of ``rng``."""
        s: Position = self.position_at(rng.start)
        e: Position = self.position_at(rng.end)
        return f"{s.line + 1}:{s.character + 1}-{e.line + 1}:{e.character + 1}"
