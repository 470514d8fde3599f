# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Source positions and their total order."""

from dataclasses import dataclass
from functools import total_ordering


def compare_positions(lhs: "SourcePosition", rhs: "SourcePosition") -> int:
    """Compare two source positions by line, then by column.

    Args:
        lhs: Left position.
        rhs: Right position.

    Returns:
        ``-1`` when ``lhs`` precedes ``rhs``, ``1`` when it follows, ``0`` when
        both denote the same position.
    """
    if lhs.line < rhs.line:
        return -1
    if lhs.line > rhs.line:
        return 1
    if lhs.column < rhs.column:
        return -1
    if lhs.column > rhs.column:
        return 1
    return 0


@total_ordering
@dataclass(frozen=True)
class SourcePosition:
    """Represent one position in a class script.

    Attributes:
        line: Line number (1-based).
        column: Column offset (0-based).
    """

    line: int
    column: int

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SourcePosition):
            return NotImplemented
        return compare_positions(self, other) < 0

    def to_tree(self) -> dict[str, int]:
        """Render the position for serialization."""
        return {"line": self.line, "column": self.column}
