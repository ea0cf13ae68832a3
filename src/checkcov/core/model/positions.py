"""Source positions and half-open ranges shared by statements and profile blocks."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A 1-based ``(line, column)`` source position.

    Columns count bytes, matching Go tooling. ``byte_offset`` is carried for
    diagnostics only; ordering and equality use ``(line, column)``.
    """

    line: int
    column: int
    byte_offset: int = field(default=-1, compare=False)

    def __str__(self) -> str:
        return f"{self.line}.{self.column}"


@dataclass(frozen=True, slots=True)
class Range:
    """Half-open ``[start, end)`` span of source text."""

    start: Position
    end: Position

    @classmethod
    def of(cls, start_line: int, start_col: int, end_line: int, end_col: int) -> Range:
        return cls(Position(start_line, start_col), Position(end_line, end_col))

    @property
    def is_empty(self) -> bool:
        return self.start >= self.end

    def __str__(self) -> str:
        return f"{self.start},{self.end}"


def overlaps(a: Range, b: Range) -> bool:
    """Return ``True`` when *a* and *b* share at least one column.

    A range ending exactly where the other starts does not overlap it, and
    zero-width ranges overlap nothing.
    """
    if a.is_empty or b.is_empty:
        return False
    return not (a.end <= b.start or a.start >= b.end)


__all__ = ["Position", "Range", "overlaps"]
