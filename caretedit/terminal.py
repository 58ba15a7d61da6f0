"""Terminal interface using Blessed for sizing, caret placement and drawing."""

import logging
from typing import Optional, TYPE_CHECKING

import blessed

from .modes import Mode
from .position import ScreenLocation, Size

if TYPE_CHECKING:
    from .screen import Screen

logger = logging.getLogger(__name__)

# DECSCUSR caret shapes
CARET_BLINKING_BLOCK = "\x1b[1 q"
CARET_BLINKING_BAR = "\x1b[5 q"


class TerminalError(OSError):
    """A terminal query or write failed."""


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Raw mode and the alternate screen belong to whoever runs the input loop;
    this class only measures, paints and places the caret.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()

    def size(self) -> Size:
        """Terminal size in columns and rows."""
        try:
            return Size(self.term.width, self.term.height)
        except OSError as e:
            raise TerminalError(f"Could not query terminal size: {e}") from e

    def move_caret_to(self, location: ScreenLocation):
        """Move the caret without redrawing the screen."""
        self._write(self.term.move(location.row, location.col) + self.term.normal_cursor)

    def set_caret_style(self, mode: Mode):
        """Bar caret while inserting, blinking block otherwise."""
        if not self.term.does_styling:
            return
        self._write(CARET_BLINKING_BAR if mode is Mode.INSERT else CARET_BLINKING_BLOCK)

    def draw_screen(self, screen: 'Screen'):
        """Paint the gutter, the visible text, the status line and the caret."""
        gutter = screen.inner_boundary.left
        out = [self.term.home]
        for offset, text in enumerate(screen.visible_lines()):
            row = screen.scroll_offset.row + offset
            out.append(self.term.move(screen.inner_boundary.top + offset, 0))
            out.append(self._gutter_text(row, gutter, row < screen.buffer.num_lines))
            out.append(text + self.term.clear_eol)

        if screen.inner_boundary.bottom > 0:
            status_row = screen.size.height - screen.inner_boundary.bottom
            status = f" {screen.mode.value.upper()} "
            if screen.buffer.path is not None:
                status += f" {screen.buffer.path}{' [+]' if screen.buffer.modified else ''}"
            if screen.status_message:
                status += f"  {screen.status_message}"
            out.append(self.term.move(status_row, 0) + self.term.reverse
                       + status[:screen.size.width].ljust(screen.size.width) + self.term.normal)

        out.append(self.term.move(screen.screen_location.row, screen.screen_location.col))
        self._write("".join(out))

    @staticmethod
    def _gutter_text(row: int, width: int, exists: bool) -> str:
        if width <= 0:
            return ""
        if not exists:
            return "~".ljust(width)
        # Right-aligned line number followed by one space
        number = str(row + 1)[-(width - 1):] if width > 1 else ""
        return number.rjust(width - 1) + " "

    def _write(self, text: str):
        try:
            print(text, end='', flush=True)
        except OSError as e:
            raise TerminalError(f"Could not write to terminal: {e}") from e
