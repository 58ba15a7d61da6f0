"""System clipboard integration for yanked text."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ClipboardManager:
    """Best-effort bridge between the yank register and the system clipboard.

    The register is the source of truth; the clipboard is only mirrored when
    a clipboard mechanism is available (none is on a bare TTY or in CI).
    """

    @staticmethod
    def copy_text(text: str) -> bool:
        """Copy text to the system clipboard.

        Returns:
            True if the clipboard accepted the text.
        """
        import pyperclip
        try:
            pyperclip.copy(text)
            return True
        except pyperclip.PyperclipException as e:
            logger.debug(f"Clipboard unavailable, keeping text in register only: {e}")
            return False

    @staticmethod
    def paste_text() -> Optional[str]:
        """Return the clipboard contents, or None if there is no clipboard."""
        import pyperclip
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.debug(f"Clipboard unavailable: {e}")
            return None
