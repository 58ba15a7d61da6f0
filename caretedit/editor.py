"""Editor controller: the open screens and routing of actions between them."""

import logging
from typing import Optional

from .actions import Action, ScreenAction, ScreenActionType
from .constants import EditorConstants
from .modes import UnhandledActionError
from .position import Size
from .screen import Screen
from .settings import EditorSettings, SettingsPersistence, get_persistence
from .terminal import TerminalError, TerminalInterface

logger = logging.getLogger(__name__)


class Editor:
    """Main editor controller.

    Owns an indexed list of screens; each screen exclusively owns its buffer,
    cursor and viewport. The input loop feeding ``dispatch`` lives elsewhere.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[EditorSettings] = None,
                 persistence: Optional[SettingsPersistence] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.persistence = persistence or get_persistence()
        self.settings = settings or self.persistence.load_editor_settings()
        self.screens: list[Screen] = []
        self.current_screen = 0
        self.should_quit = False

    @property
    def screen(self) -> Optional[Screen]:
        if not self.screens:
            return None
        return self.screens[self.current_screen]

    def new_screen(self) -> Screen:
        """Open a screen on an empty, unnamed buffer."""
        screen = Screen(size=self._terminal_size(), boundary=self.settings.boundary(),
                        scroll_policy=self.settings.scroll_policy)
        self.screens.append(screen)
        self.current_screen = len(self.screens) - 1
        return screen

    def open_file(self, file_path) -> Screen:
        """Open ``file_path`` in a new screen and make it current.

        The cursor goes back to where it was when the file was last closed.
        """
        screen = self.new_screen()
        screen.load_file(file_path, strip_carriage_return=self.settings.strip_carriage_return)
        remembered = self.persistence.load_document_position(str(file_path))
        if remembered is not None:
            screen.restore_position(*remembered)
        logger.info(f"Opened {file_path} ({screen.buffer.num_lines} lines) in screen {self.current_screen}")
        return screen

    def change_screen(self, index: int):
        if not 0 <= index < len(self.screens):
            raise IndexError(f"No screen {index}")
        self.current_screen = index

    def close_screen(self):
        """Close the current screen without saving; quit when none are left."""
        screen = self.screen
        if screen is None:
            return
        self._remember_position(screen)
        del self.screens[self.current_screen]
        if not self.screens:
            self.current_screen = 0
            self.should_quit = True
        else:
            self.current_screen = min(self.current_screen, len(self.screens) - 1)

    def dispatch(self, action: Action) -> Optional[ScreenAction]:
        """Apply an action to the current screen and carry out what it asks for."""
        screen = self.screen
        if screen is None:
            return None
        try:
            result = screen.apply(action)
        except UnhandledActionError as e:
            logger.debug(str(e))
            screen.status_message = str(e)
            return None
        if result is None:
            return None
        if result.action_type is ScreenActionType.OPEN_SCREEN:
            self.open_file(result.path)
        elif result.action_type is ScreenActionType.QUIT_SCREEN:
            self.close_screen()
        elif result.action_type is ScreenActionType.QUIT_EDITOR:
            self._quit(screen, force=result.force)
        return result

    def resize(self):
        """Re-query the terminal size and rescroll every screen."""
        size = self._terminal_size()
        for screen in self.screens:
            screen.resize(size)

    def draw(self) -> bool:
        screen = self.screen
        if screen is None:
            return False
        try:
            self.terminal.draw_screen(screen)
            self.terminal.set_caret_style(screen.mode)
            return True
        except TerminalError as e:
            logger.warning(f"Could not draw screen: {e}")
            return False

    def place_caret(self) -> bool:
        """Move the hardware caret to the current screen's cursor."""
        screen = self.screen
        if screen is None:
            return False
        try:
            self.terminal.set_caret_style(screen.mode)
            self.terminal.move_caret_to(screen.screen_location)
            return True
        except TerminalError as e:
            logger.warning(f"Could not place caret: {e}")
            return False

    def _quit(self, screen: Screen, force: bool):
        if not force and any(s.buffer.modified for s in self.screens):
            screen.status_message = EditorConstants.UNSAVED_CHANGES_MESSAGE
            return
        for open_screen in self.screens:
            self._remember_position(open_screen)
        self.screens.clear()
        self.current_screen = 0
        self.should_quit = True

    def _remember_position(self, screen: Screen):
        if screen.buffer.path is None:
            return
        position = screen.text_position
        self.persistence.save_document_position(str(screen.buffer.path), position.row, position.grapheme)

    def _terminal_size(self) -> Size:
        try:
            return self.terminal.size()
        except TerminalError as e:
            logger.warning(f"Could not query terminal size: {e}")
            return Size(0, 0)
