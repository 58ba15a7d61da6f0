"""A single line of UTF-8 text with a grapheme boundary index.

Every line keeps two parallel lists, ``grapheme_starts`` and
``grapheme_ends``, holding the inclusive byte range of each extended
grapheme cluster. Edits shift the index in place instead of re-segmenting
the whole line; only when an edit fuses or separates clusters at its seams
(combining marks, joiners, regional indicator pairs) is the index rebuilt.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right

import regex

GRAPHEME_PATTERN = regex.compile(r"\X")


class GraphemeIndexError(IndexError):
    """An edit addressed a grapheme or byte position the line does not have."""


def grapheme_boundaries(text: str) -> tuple[list[int], list[int]]:
    """Return ``(starts, ends)`` byte offsets for the clusters of ``text``.

    Ends are inclusive: ``text.encode()[starts[i]:ends[i] + 1]`` is the i-th
    cluster.
    """
    starts: list[int] = []
    ends: list[int] = []
    offset = 0
    for cluster in GRAPHEME_PATTERN.findall(text):
        size = len(cluster.encode("utf-8"))
        starts.append(offset)
        ends.append(offset + size - 1)
        offset += size
    return starts, ends


class Line:
    """One line of text plus its grapheme boundary index."""

    def __init__(self, text: str = ""):
        self._data = bytearray(text.encode("utf-8"))
        self.grapheme_starts, self.grapheme_ends = grapheme_boundaries(text)

    @classmethod
    def from_string(cls, text: str) -> "Line":
        return cls(text)

    @property
    def text(self) -> str:
        return self._data.decode("utf-8")

    @property
    def grapheme_count(self) -> int:
        return len(self.grapheme_starts)

    @property
    def byte_length(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    # --- Edits ---

    def insert_char(self, grapheme_index: int, character: str) -> None:
        """Insert ``character`` before the grapheme at ``grapheme_index``.

        ``grapheme_index == grapheme_count`` appends. Anything outside
        ``[0, grapheme_count]`` raises GraphemeIndexError.
        """
        if len(character) != 1:
            raise ValueError(f"Expected a single character, got {character!r}")
        self._check_insert_index(grapheme_index)
        encoded = character.encode("utf-8")
        size = len(encoded)
        if grapheme_index == self.grapheme_count:
            # Appending only touches the tail of the index
            position = len(self._data)
            self._data.extend(encoded)
            self.grapheme_starts.append(position)
            self.grapheme_ends.append(position + size - 1)
        else:
            position = self.grapheme_starts[grapheme_index]
            self._data[position:position] = encoded
            self._shift(grapheme_index, size)
            self.grapheme_starts.insert(grapheme_index, position)
            self.grapheme_ends.insert(grapheme_index, position + size - 1)
        self._repair_seams(grapheme_index, grapheme_index)

    def insert_str(self, grapheme_index: int, text: str) -> None:
        """Insert ``text`` before the grapheme at ``grapheme_index``.

        The inserted text is segmented on its own and then offset into place.
        """
        self._check_insert_index(grapheme_index)
        if not text:
            return
        encoded = text.encode("utf-8")
        starts, ends = grapheme_boundaries(text)
        if grapheme_index == self.grapheme_count:
            position = len(self._data)
        else:
            position = self.grapheme_starts[grapheme_index]
        self._data[position:position] = encoded
        self._shift(grapheme_index, len(encoded))
        self.grapheme_starts[grapheme_index:grapheme_index] = [s + position for s in starts]
        self.grapheme_ends[grapheme_index:grapheme_index] = [e + position for e in ends]
        self._repair_seams(grapheme_index, grapheme_index + len(starts) - 1)

    def delete_grapheme(self, grapheme_index: int) -> None:
        """Remove the whole cluster at ``grapheme_index``.

        Out-of-range indices are ignored so a stale cursor never breaks
        rendering.
        """
        if grapheme_index < 0 or grapheme_index >= self.grapheme_count:
            return
        start = self.grapheme_starts[grapheme_index]
        end = self.grapheme_ends[grapheme_index]
        del self._data[start:end + 1]
        del self.grapheme_starts[grapheme_index]
        del self.grapheme_ends[grapheme_index]
        self._shift(grapheme_index, -(end - start + 1))
        self._repair_seams(grapheme_index - 1, grapheme_index)

    def append(self, other: "Line") -> None:
        """Append another line's text, keeping the index consistent."""
        seam = self.grapheme_count
        offset = len(self._data)
        self._data.extend(other._data)
        self.grapheme_starts.extend(s + offset for s in other.grapheme_starts)
        self.grapheme_ends.extend(e + offset for e in other.grapheme_ends)
        self._repair_seams(seam - 1, seam)

    def split_line(self, byte_index: int) -> "Line":
        """Truncate this line at ``byte_index`` and return the remainder.

        ``byte_index`` has to fall on a grapheme start or the end of the text.
        """
        count = self.grapheme_count
        if byte_index == len(self._data):
            split_at = count
        else:
            split_at = bisect_left(self.grapheme_starts, byte_index)
            if byte_index < 0 or split_at >= count or self.grapheme_starts[split_at] != byte_index:
                raise GraphemeIndexError(
                    f"Byte {byte_index} is not a grapheme boundary of {self.text!r}"
                )
        remainder = Line(self._data[byte_index:].decode("utf-8"))
        del self._data[byte_index:]
        del self.grapheme_starts[split_at:]
        del self.grapheme_ends[split_at:]
        return remainder

    def split_line_grapheme(self, grapheme_index: int) -> "Line":
        """Split at the start of ``grapheme_index``."""
        self._check_insert_index(grapheme_index)
        if grapheme_index == self.grapheme_count:
            return self.split_line(len(self._data))
        return self.split_line(self.grapheme_starts[grapheme_index])

    # --- Queries ---

    def grapheme_start(self, grapheme_index: int) -> int:
        if self.grapheme_count == 0:
            return 0
        return self.grapheme_starts[self._clamp(grapheme_index)]

    def grapheme_end(self, grapheme_index: int) -> int:
        if self.grapheme_count == 0:
            return 0
        return self.grapheme_ends[self._clamp(grapheme_index)]

    def next_grapheme_start(self, grapheme_index: int) -> int:
        return self.grapheme_start(grapheme_index + 1)

    def prev_grapheme_start(self, grapheme_index: int) -> int:
        return self.grapheme_start(grapheme_index - 1)

    def next_grapheme_end(self, grapheme_index: int) -> int:
        return self.grapheme_end(grapheme_index + 1)

    def prev_grapheme_end(self, grapheme_index: int) -> int:
        return self.grapheme_end(grapheme_index - 1)

    def text_index_to_grapheme(self, text_index: int) -> int:
        """Return the grapheme containing byte ``text_index``."""
        if self.grapheme_count == 0:
            return 0
        if text_index >= len(self._data):
            return self.grapheme_count - 1
        return max(bisect_right(self.grapheme_starts, text_index) - 1, 0)

    def text_index_to_grapheme_range(self, text_index: int) -> range:
        """Return the byte range (end exclusive) of the grapheme containing ``text_index``."""
        if self.grapheme_count == 0:
            return range(0, 0)
        index = self.text_index_to_grapheme(text_index)
        return range(self.grapheme_starts[index], self.grapheme_ends[index] + 1)

    def grapheme(self, grapheme_index: int) -> str:
        if not 0 <= grapheme_index < self.grapheme_count:
            raise GraphemeIndexError(f"No grapheme {grapheme_index} in {self.text!r}")
        start = self.grapheme_starts[grapheme_index]
        return self._data[start:self.grapheme_ends[grapheme_index] + 1].decode("utf-8")

    def graphemes(self, start: int, end: int) -> str:
        """Return the text of graphemes ``start`` through ``end`` inclusive.

        ``end`` is clamped to the last grapheme; a ``start`` past the end of
        the line or after ``end`` gives "".
        """
        if start >= self.grapheme_count:
            return ""
        start = max(start, 0)
        end = min(end, self.grapheme_count - 1)
        if start > end:
            return ""
        return self._data[self.grapheme_starts[start]:self.grapheme_ends[end] + 1].decode("utf-8")

    # --- Internals ---

    def _clamp(self, grapheme_index: int) -> int:
        return min(max(grapheme_index, 0), self.grapheme_count - 1)

    def _check_insert_index(self, grapheme_index: int) -> None:
        if grapheme_index < 0 or grapheme_index > self.grapheme_count:
            raise GraphemeIndexError(
                f"Grapheme index {grapheme_index} outside [0, {self.grapheme_count}]"
            )

    def _shift(self, first: int, delta: int) -> None:
        for idx in range(first, self.grapheme_count):
            self.grapheme_starts[idx] += delta
            self.grapheme_ends[idx] += delta

    def _repair_seams(self, first: int, last: int) -> None:
        # Re-segment the edited graphemes plus one neighbour each side; if the
        # result differs from the shifted index, clusters fused or split.
        count = self.grapheme_count
        if count == 0:
            return
        lo = min(max(first - 1, 0), count - 1)
        hi = min(max(last + 1, 0), count - 1)
        if lo > hi:
            return
        base = self.grapheme_starts[lo]
        window = self._data[base:self.grapheme_ends[hi] + 1].decode("utf-8")
        expected = (
            [s - base for s in self.grapheme_starts[lo:hi + 1]],
            [e - base for e in self.grapheme_ends[lo:hi + 1]],
        )
        if grapheme_boundaries(window) != expected:
            self.grapheme_starts, self.grapheme_ends = grapheme_boundaries(self.text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return (
            self._data == other._data
            and self.grapheme_starts == other.grapheme_starts
            and self.grapheme_ends == other.grapheme_ends
        )

    def __repr__(self) -> str:
        return f"Line({self.text!r})"
