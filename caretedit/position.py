from dataclasses import dataclass
from typing import NamedTuple

from .constants import EditorConstants


@dataclass
class TextPosition:
    """Location of the cursor within the text.

    ``byte`` caches ``grapheme_starts[grapheme]`` of line ``row`` and is
    stale after any row/grapheme change until the owner resyncs it.
    """
    row: int = 0
    grapheme: int = 0
    byte: int = 0

    def __lt__(self, other):
        if self.row != other.row:
            return self.row < other.row
        return self.grapheme < other.grapheme

    def __ge__(self, other):
        return not self < other

    def copy(self) -> "TextPosition":
        return TextPosition(self.row, self.grapheme, self.byte)


@dataclass
class ScreenLocation:
    """A (row, col) on the screen or a scroll offset into the document."""
    row: int = 0
    col: int = 0

    def __add__(self, other):
        return ScreenLocation(self.row + other.row, self.col + other.col)

    def __sub__(self, other):
        # Saturating, screen coordinates never go negative
        return ScreenLocation(max(self.row - other.row, 0), max(self.col - other.col, 0))


@dataclass
class Boundary:
    """Rows/columns of padding on each edge of the screen."""
    top: int = EditorConstants.DEFAULT_INSET_TOP
    right: int = EditorConstants.DEFAULT_INSET_RIGHT
    left: int = EditorConstants.DEFAULT_INSET_LEFT
    bottom: int = EditorConstants.DEFAULT_INSET_BOTTOM


class Size(NamedTuple):
    width: int
    height: int
