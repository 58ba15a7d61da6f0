"""Ordered collection of lines plus whole-document operations."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from .constants import EditorConstants
from .line import Line
from .position import TextPosition

logger = logging.getLogger(__name__)

NEWLINE = EditorConstants.LINE_TERMINATOR


class Buffer:
    """A text buffer: the lines of one document and where to write them."""

    def __init__(self, lines: Optional[Iterable[Line]] = None, path: Optional[Path] = None,
                 extension: Optional[str] = None):
        self.lines: list[Line] = list(lines) if lines is not None else []
        self.path = Path(path) if path is not None else None
        self.extension = extension
        self.modified = False

    @classmethod
    def empty(cls) -> "Buffer":
        return cls()

    @classmethod
    def from_strings(cls, strings: Iterable[str], path: Optional[Path] = None) -> "Buffer":
        return cls([Line(s) for s in strings], path=path)

    @classmethod
    def from_file(cls, file_path, strip_carriage_return: bool = True) -> "Buffer":
        """Read ``file_path`` into a buffer.

        A missing or unreadable file gives an empty buffer targeting that path.
        A trailing terminator does not add an empty last line.
        """
        path = Path(file_path)
        content = ""
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"{path} does not exist, starting with an empty buffer")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")

        raw_lines = content.split(NEWLINE)
        if raw_lines and raw_lines[-1] == "":
            raw_lines.pop()
        if strip_carriage_return:
            raw_lines = [
                s[:-1] if s.endswith(EditorConstants.CARRIAGE_RETURN) else s
                for s in raw_lines
            ]
        extension = path.suffix[1:] or None
        buffer = cls([Line(s) for s in raw_lines], path=path, extension=extension)
        logger.debug(f"Loaded {buffer.num_lines} lines from {path}")
        return buffer

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> Line:
        return self.lines[index]

    def to_string(self) -> str:
        """Serialized form: every line followed by a terminator."""
        return "".join(line.text + NEWLINE for line in self.lines) or NEWLINE

    def write_file(self, file_path=None) -> bool:
        """Write the buffer to ``file_path`` (or its own path) atomically.

        Returns:
            True if the write succeeded, False otherwise.
        """
        target = Path(file_path) if file_path is not None else self.path
        if target is None:
            logger.warning("Buffer has no path to write to")
            return False
        content = self.to_string()
        dir_name = str(target.parent) or "."
        temp_filename = None
        try:
            # Same directory keeps the rename on one filesystem
            with tempfile.NamedTemporaryFile(mode="w", encoding="utf-8", dir=dir_name,
                                             prefix=EditorConstants.ATOMIC_SAVE_PREFIX + target.name,
                                             suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                             newline="", delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_filename, target)
        except OSError as e:
            logger.warning(f"Could not write {target}: {e}")
            if temp_filename is not None and os.path.exists(temp_filename):
                try:
                    os.remove(temp_filename)
                except OSError:
                    pass
            return False
        self.path = target
        self.modified = False
        logger.info(f"Wrote {self.num_lines} lines to {target}")
        return True

    # --- Edits ---

    def insert_char(self, line: int, grapheme_index: int, character: str) -> None:
        self.lines[line].insert_char(grapheme_index, character)
        self.modified = True

    def delete_char(self, line: int, grapheme_index: int) -> None:
        """Delete a grapheme, or the whole line if it is empty."""
        target = self.lines[line]
        if target.is_empty():
            del self.lines[line]
        else:
            target.delete_grapheme(grapheme_index)
        self.modified = True

    def new_line(self, line: int, grapheme_index: int) -> None:
        """Split ``line`` at ``grapheme_index``; past the end, append an empty line."""
        if line >= self.num_lines:
            self.lines.append(Line())
        else:
            remainder = self.lines[line].split_line_grapheme(grapheme_index)
            self.lines.insert(line + 1, remainder)
        self.modified = True

    def join_lines(self, line: int) -> None:
        """Merge line ``line + 1`` onto the end of ``line``."""
        if line + 1 >= self.num_lines:
            return
        following = self.lines.pop(line + 1)
        self.lines[line].append(following)
        self.modified = True

    def copy_text(self, start: TextPosition, end: TextPosition) -> str:
        """Return the text from ``start`` through ``end`` (inclusive graphemes)."""
        if end < start:
            start, end = end, start
        if start.row == end.row:
            return self.lines[start.row].graphemes(start.grapheme, end.grapheme)
        first = self.lines[start.row]
        parts = [first.graphemes(start.grapheme, first.grapheme_count - 1)]
        for row in range(start.row + 1, end.row):
            parts.append(self.lines[row].text)
        parts.append(self.lines[end.row].graphemes(0, end.grapheme))
        return NEWLINE.join(parts)

    def delete_text(self, start: TextPosition, end: TextPosition) -> None:
        """Remove exactly the text ``copy_text(start, end)`` returns."""
        if end < start:
            start, end = end, start
        first = self.lines[start.row]
        if start.row == end.row:
            last_index = min(end.grapheme, first.grapheme_count - 1)
            for _ in range(start.grapheme, last_index + 1):
                first.delete_grapheme(start.grapheme)
            self.modified = True
            return
        # Keep the head of the first row and the tail of the last row
        last = self.lines[end.row]
        tail = last.split_line_grapheme(min(end.grapheme + 1, last.grapheme_count))
        first.split_line_grapheme(min(start.grapheme, first.grapheme_count))
        first.append(tail)
        del self.lines[start.row + 1:end.row + 1]
        self.modified = True

    def paste_text(self, position: TextPosition, text: str) -> TextPosition:
        """Insert ``text`` at ``position`` and split any embedded terminators.

        Returns:
            The position just past the inserted text.
        """
        if self.num_lines == 0:
            self.lines.append(Line())
        target = self.lines[position.row]
        grapheme_index = min(position.grapheme, target.grapheme_count)
        tail_graphemes = target.grapheme_count - grapheme_index
        target.insert_str(grapheme_index, text)
        self.modified = True
        last_row = position.row + text.count(NEWLINE)
        self.normalize_newlines()
        last_line = self.lines[last_row]
        return TextPosition(last_row, max(last_line.grapheme_count - tail_graphemes, 0))

    def normalize_newlines(self) -> None:
        """Split every line that contains a terminator into separate lines."""
        row = 0
        while row < self.num_lines:
            text = self.lines[row].text
            index = text.find(NEWLINE)
            if index < 0:
                row += 1
                continue
            # "\r\n" is one cluster, so split on the character rather than a
            # grapheme boundary; a preceding "\r" stays with the line
            self.lines[row] = Line(text[:index])
            self.lines.insert(row + 1, Line(text[index + 1:]))
            row += 1

    # --- Rendering ---

    def print_line(self, line: int, start_grapheme: int, end_grapheme: int,
                   highlighted: bool = False) -> str:
        """Return graphemes ``start_grapheme`` through ``end_grapheme`` of ``line``.

        ``highlighted`` is accepted for renderers but does not change the output yet.
        """
        if line < 0 or line >= self.num_lines:
            return ""
        target = self.lines[line]
        if start_grapheme >= target.grapheme_count:
            return ""
        return target.graphemes(start_grapheme, min(end_grapheme, target.grapheme_count - 1))

    def __repr__(self) -> str:
        return f"Buffer({[line.text for line in self.lines]!r}, path={self.path!r})"
