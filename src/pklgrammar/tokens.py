"""Positioned tokens produced by running the grammar through the engine."""

from __future__ import annotations

from dataclasses import dataclass

from pygments.token import _TokenType


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A classified run of source text."""

    type: _TokenType
    value: str
    span: Span


class PositionTracker:
    """Convert character offsets into line/column positions, front to back."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._offset = 0
        self._line = 1
        self._col = 1

    def at(self, offset: int) -> Position:
        """Position of `offset`; offsets must be requested in ascending order."""
        chunk = self._source[self._offset : offset]
        newlines = chunk.count("\n")
        if newlines:
            self._line += newlines
            self._col = len(chunk) - chunk.rindex("\n")
        else:
            self._col += len(chunk)
        self._offset = offset
        return Position(self._line, self._col, offset)
