"""A screen: one buffer, the cursor within it and the viewport onto it."""

from __future__ import annotations

import logging
from typing import Optional

import regex

from .actions import Action, ScreenAction, ScreenActionType
from .buffer import Buffer
from .constants import EditorConstants
from .line import Line
from .modes import Mode, get_mode_handler
from .position import Boundary, ScreenLocation, Size, TextPosition

logger = logging.getLogger(__name__)

WORD_PATTERN = regex.compile(r"[\w" + regex.escape(EditorConstants.WORD_PUNCTUATION) + r"]+")


def word_spans(line: Line) -> list[tuple[int, str]]:
    """Return ``(byte_offset, word)`` for every word on ``line``."""
    text = line.text
    spans = []
    consumed = 0
    byte_offset = 0
    for match in WORD_PATTERN.finditer(text):
        byte_offset += len(text[consumed:match.start()].encode("utf-8"))
        consumed = match.start()
        spans.append((byte_offset, match.group()))
    return spans


class Screen:
    """The currently viewed document and everything needed to place its caret.

    Every movement or edit finishes by resyncing the cursor's byte cache and
    the viewport, so a renderer always observes a consistent state.
    """

    def __init__(self, buffer: Optional[Buffer] = None, size: Optional[Size] = None,
                 boundary: Optional[Boundary] = None,
                 scroll_policy: str = EditorConstants.DEFAULT_SCROLL_POLICY):
        self.buffer = buffer if buffer is not None else Buffer.empty()
        self.text_position = TextPosition()
        self.screen_location = ScreenLocation()
        self.scroll_offset = ScreenLocation()
        self.inner_boundary = boundary if boundary is not None else Boundary()
        self.size = size if size is not None else Size(0, 0)
        self.scroll_policy = scroll_policy
        self.mode = Mode.NORMAL
        self.selection_anchor: Optional[TextPosition] = None
        self.register = ""
        self.status_message: Optional[str] = None
        self.quit_screen = False
        self.scroll_into_view()

    def load_file(self, file_path, strip_carriage_return: bool = True):
        self.buffer = Buffer.from_file(file_path, strip_carriage_return=strip_carriage_return)
        self.text_position = TextPosition()
        self.scroll_offset = ScreenLocation()
        self._sync_text_position_byte_to_grapheme()
        self.scroll_into_view()

    def write(self, file_path=None) -> bool:
        """Write the buffer and report the outcome in the status line."""
        target = file_path if file_path is not None else self.buffer.path
        if target is None:
            self.status_message = EditorConstants.NO_PATH_MESSAGE
            return False
        if self.buffer.write_file(target):
            self.status_message = EditorConstants.SAVED_MESSAGE.format(self.buffer.num_lines, target)
            return True
        self.status_message = EditorConstants.SAVE_FAILED_MESSAGE.format(target)
        return False

    # --- Actions and modes ---

    def apply(self, action: Action) -> Optional[ScreenAction]:
        """Apply an action through the current mode's handler."""
        result = get_mode_handler(self.mode).handle(self, action)
        if result is not None and result.action_type is ScreenActionType.ENTER_MODE:
            self.set_mode(result.mode)
        elif result is not None and result.action_type is ScreenActionType.QUIT_SCREEN:
            self.quit_screen = True
        return result

    def set_mode(self, mode: Mode):
        if mode is self.mode:
            return
        logger.debug(f"Mode {self.mode.value} -> {mode.value}")
        previous = self.mode
        self.mode = mode
        if mode is Mode.SELECT:
            self.selection_anchor = self.text_position.copy()
        elif previous is Mode.SELECT:
            self.selection_anchor = None
        if mode is not Mode.INSERT:
            # Only insert mode may leave the cursor past the last grapheme
            self._sync_text_position_byte_to_grapheme()
            self.scroll_into_view()

    # --- Movement ---

    def move_up(self, count: int = 1):
        self.text_position.row = max(self.text_position.row - count, 0)
        self._finish_move()

    def move_down(self, count: int = 1):
        last_row = max(self.buffer.num_lines - 1, 0)
        self.text_position.row = min(self.text_position.row + count, last_row)
        self._finish_move()

    def move_left(self, count: int = 1):
        self.text_position.grapheme = max(self.text_position.grapheme - count, 0)
        self._finish_move()

    def move_right(self, count: int = 1):
        self.text_position.grapheme = min(self.text_position.grapheme + count, self._last_column())
        self._finish_move()

    def move_start_line(self):
        self.text_position.grapheme = 0
        self._finish_move()

    def move_end_line(self):
        self.text_position.grapheme = self._last_column()
        self._finish_move()

    def move_first_line(self):
        self.text_position.row = 0
        self._finish_move()

    def move_last_line(self):
        self.text_position.row = max(self.buffer.num_lines - 1, 0)
        self._finish_move()

    def move_to_line(self, row: int):
        self.text_position.row = min(max(row, 0), max(self.buffer.num_lines - 1, 0))
        self._finish_move()

    def restore_position(self, row: int, grapheme: int):
        """Put the cursor back at a remembered position, clamped to the buffer."""
        self.text_position.row = row
        self.text_position.grapheme = grapheme
        self._finish_move()

    def move_next_word(self, count: int = 1):
        for _ in range(count):
            target = self._search_forward(lambda word: True)
            if target is None:
                break
            self.text_position.row, self.text_position.grapheme = target
            self._sync_text_position_byte_to_grapheme()
        self.scroll_into_view()

    def move_prev_word(self, count: int = 1):
        for _ in range(count):
            target = self._search_backward()
            if target is None:
                break
            self.text_position.row, self.text_position.grapheme = target
            self._sync_text_position_byte_to_grapheme()
        self.scroll_into_view()

    def find_word(self, word: str) -> bool:
        """Move to the next occurrence of ``word`` as a whole word, searching forward."""
        if not word:
            return False
        target = self._search_forward(lambda candidate: candidate == word)
        if target is None:
            return False
        self.text_position.row, self.text_position.grapheme = target
        self._finish_move()
        return True

    def _search_forward(self, accept) -> Optional[tuple[int, int]]:
        if self.buffer.num_lines == 0:
            return None
        position = self.text_position
        line = self.buffer.lines[position.row]
        for start, word in word_spans(line):
            if start > position.byte and accept(word):
                return position.row, line.text_index_to_grapheme(start)
        for row in range(position.row + 1, self.buffer.num_lines):
            line = self.buffer.lines[row]
            for start, word in word_spans(line):
                if accept(word):
                    return row, line.text_index_to_grapheme(start)
        return None

    def _search_backward(self) -> Optional[tuple[int, int]]:
        if self.buffer.num_lines == 0:
            return None
        position = self.text_position
        line = self.buffer.lines[position.row]
        for start, _ in reversed(word_spans(line)):
            if start < position.byte:
                return position.row, line.text_index_to_grapheme(start)
        for row in range(position.row - 1, -1, -1):
            spans = word_spans(self.buffer.lines[row])
            if spans:
                return row, self.buffer.lines[row].text_index_to_grapheme(spans[-1][0])
        return None

    # --- Editing ---

    def insert_char(self, character: str):
        """Insert before the cursor and advance past the new character."""
        position = self.text_position
        if self.buffer.num_lines == 0:
            self.buffer.new_line(0, 0)
        line = self.buffer.lines[position.row]
        before = line.grapheme_count
        at = min(position.grapheme, before)
        self.buffer.insert_char(position.row, at, character)
        # A combining character joins its neighbour instead of adding a grapheme
        position.grapheme = at + (line.grapheme_count - before)
        self._finish_move()

    def delete_grapheme(self, location: Optional[TextPosition] = None):
        """Delete the grapheme at ``location`` (default: the cursor)."""
        location = location if location is not None else self.text_position
        if self.buffer.num_lines == 0:
            return
        self.buffer.delete_char(location.row, location.grapheme)
        self._finish_move()

    def backspace(self):
        position = self.text_position
        if self.buffer.num_lines == 0:
            return
        line = self.buffer.lines[position.row]
        if position.grapheme > 0 and not line.is_empty():
            at = min(position.grapheme, line.grapheme_count) - 1
            before = line.grapheme_count
            self.buffer.delete_char(position.row, at)
            position.grapheme = at + 1 - (before - line.grapheme_count)
        elif position.row > 0:
            join_at = self.buffer.lines[position.row - 1].grapheme_count
            if self.buffer.lines[position.row].is_empty():
                self.buffer.delete_char(position.row, 0)
            else:
                self.buffer.join_lines(position.row - 1)
            position.row -= 1
            position.grapheme = join_at
        self._finish_move()

    def new_line(self):
        """Split the current line at the cursor and move to the new line."""
        position = self.text_position
        if self.buffer.num_lines == 0:
            self.buffer.new_line(0, 0)
        line = self.buffer.lines[position.row]
        self.buffer.new_line(position.row, min(position.grapheme, line.grapheme_count))
        position.row += 1
        position.grapheme = 0
        self._finish_move()

    def open_line_below(self):
        position = self.text_position
        if self.buffer.num_lines == 0:
            self.buffer.new_line(0, 0)
        line = self.buffer.lines[position.row]
        self.buffer.new_line(position.row, line.grapheme_count)
        position.row += 1
        position.grapheme = 0
        self._finish_move()

    def selection_range(self) -> Optional[tuple[TextPosition, TextPosition]]:
        if self.selection_anchor is None:
            return None
        start, end = self.selection_anchor.copy(), self.text_position.copy()
        if end < start:
            start, end = end, start
        return start, end

    def yank_selection(self) -> str:
        """Copy the selection into the register."""
        selection = self.selection_range()
        if selection is None or self.buffer.num_lines == 0:
            return ""
        self.register = self.buffer.copy_text(*selection)
        return self.register

    def cut_selection(self) -> str:
        """Copy the selection into the register and remove it from the buffer."""
        selection = self.selection_range()
        if selection is None or self.buffer.num_lines == 0:
            return ""
        start, end = selection
        self.register = self.buffer.copy_text(start, end)
        self.buffer.delete_text(start, end)
        self.text_position.row, self.text_position.grapheme = start.row, start.grapheme
        self._finish_move()
        return self.register

    def paste(self):
        """Insert the register before the cursor; the cursor lands on its last grapheme."""
        if not self.register:
            return
        if self.buffer.num_lines == 0:
            self.buffer.new_line(0, 0)
        end = self.buffer.paste_text(self.text_position, self.register)
        self.text_position.row = end.row
        self.text_position.grapheme = max(end.grapheme - 1, 0)
        self._finish_move()

    # --- Viewport ---

    def resize(self, size: Size):
        self.size = size
        self.scroll_into_view()

    def view_width(self) -> int:
        return max(self.size.width - self.inner_boundary.left - self.inner_boundary.right, 0)

    def view_height(self) -> int:
        return max(self.size.height - self.inner_boundary.top - self.inner_boundary.bottom, 0)

    def scroll_into_view(self):
        """Update the scroll offset and screen location so the cursor is on screen."""
        self.scroll_offset.row = self._scrolled_offset(
            self.text_position.row, self.scroll_offset.row, self.view_height())
        self.scroll_offset.col = self._scrolled_offset(
            self.text_position.grapheme, self.scroll_offset.col, self.view_width())
        self._sync_screen_position()

    def _scrolled_offset(self, position: int, offset: int, extent: int) -> int:
        if position < offset:
            return position
        if self.scroll_policy == EditorConstants.SCROLL_POLICY_LEGACY:
            # Kept for comparison; can leave the cursor just outside the view
            if position - offset > extent:
                return position - offset - extent
            return offset
        if extent <= 0:
            return position
        if position >= offset + extent:
            return position - extent + 1
        return offset

    def _sync_screen_position(self):
        cursor = ScreenLocation(self.text_position.row, self.text_position.grapheme)
        inset = ScreenLocation(self.inner_boundary.top, self.inner_boundary.left)
        self.screen_location = (cursor - self.scroll_offset) + inset

    def visible_lines(self) -> list[str]:
        """Slices of the rows currently inside the viewport."""
        first_col = self.scroll_offset.col
        last_col = first_col + self.view_width() - 1
        return [
            self.buffer.print_line(row, first_col, last_col)
            for row in range(self.scroll_offset.row, self.scroll_offset.row + self.view_height())
        ]

    # --- Internals ---

    def _last_column(self) -> int:
        if self.buffer.num_lines == 0:
            return 0
        count = self.buffer.lines[self.text_position.row].grapheme_count
        if self.mode is Mode.INSERT:
            return count
        return max(count - 1, 0)

    def _finish_move(self):
        self._sync_text_position_byte_to_grapheme()
        self.scroll_into_view()

    def _sync_text_position_byte_to_grapheme(self):
        position = self.text_position
        if self.buffer.num_lines == 0:
            position.row = position.grapheme = position.byte = 0
            return
        position.row = min(max(position.row, 0), self.buffer.num_lines - 1)
        # Ragged: clamp to the destination line, no remembered column
        position.grapheme = min(max(position.grapheme, 0), self._last_column())
        line = self.buffer.lines[position.row]
        if position.grapheme >= line.grapheme_count:
            position.byte = line.byte_length
        else:
            position.byte = line.grapheme_start(position.grapheme)
