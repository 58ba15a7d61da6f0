"""Editor modes and the commands each mode applies to a screen."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, TYPE_CHECKING

from .actions import Action, ActionType, ScreenAction
from .clipboard import ClipboardManager
from .constants import EditorConstants

if TYPE_CHECKING:
    from .screen import Screen

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Current mode of a screen."""
    NORMAL = "normal"
    INSERT = "insert"
    JUMP = "jump"
    COMMAND = "command"
    FIND = "find"
    OPEN = "open"
    SELECT = "select"


class UnhandledActionError(Exception):
    """Raised when a mode receives an action it has no command for."""

    def __init__(self, mode: Mode, action: Action):
        super().__init__(f"{mode.value} mode does not handle {action.action_type.value}")
        self.mode = mode
        self.action = action


class ScreenCommand(ABC):
    """Base class for screen commands."""

    @abstractmethod
    def execute(self, screen: 'Screen', action: Action) -> Optional[ScreenAction]:
        """Apply the command.

        Returns:
            What the screen's owner should do next, or None.
        """
        pass


class MovementCommand(ScreenCommand):
    """Base class for cursor movement commands."""

    def execute(self, screen: 'Screen', action: Action) -> Optional[ScreenAction]:
        self._move(screen, action.count)
        return None

    @abstractmethod
    def _move(self, screen: 'Screen', count: int):
        pass


class MoveLeftCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_left(count)


class MoveRightCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_right(count)


class MoveUpCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_up(count)


class MoveDownCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_down(count)


class MoveStartLineCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_start_line()


class MoveEndLineCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_end_line()


class MoveFirstLineCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_first_line()


class MoveLastLineCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_last_line()


class MoveNextWordCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_next_word(count)


class MovePrevWordCommand(MovementCommand):
    def _move(self, screen, count):
        screen.move_prev_word(count)


class EnterModeCommand(ScreenCommand):
    def __init__(self, mode: Mode):
        self.mode = mode

    def execute(self, screen, action):
        return ScreenAction.enter_mode(self.mode)


class NoOpCommand(ScreenCommand):
    def execute(self, screen, action):
        return None


class InsertCharCommand(ScreenCommand):
    def execute(self, screen, action):
        screen.insert_char(action.character)
        return None


class DeleteCharCommand(ScreenCommand):
    def execute(self, screen, action):
        for _ in range(action.count):
            screen.delete_grapheme()
        return None


class BackspaceCommand(ScreenCommand):
    def execute(self, screen, action):
        for _ in range(action.count):
            screen.backspace()
        return None


class SplitLineCommand(ScreenCommand):
    def execute(self, screen, action):
        screen.new_line()
        return None


class OpenLineCommand(ScreenCommand):
    """Open an empty line below the cursor and start inserting there."""

    def execute(self, screen, action):
        screen.open_line_below()
        return ScreenAction.enter_mode(Mode.INSERT)


class PasteCommand(ScreenCommand):
    def execute(self, screen, action):
        if not screen.register:
            # Fall back to whatever another program left on the clipboard
            screen.register = ClipboardManager.paste_text() or ""
        for _ in range(action.count):
            screen.paste()
        return None


class YankCommand(ScreenCommand):
    def execute(self, screen, action):
        text = screen.yank_selection()
        ClipboardManager.copy_text(text)
        screen.status_message = EditorConstants.YANKED_MESSAGE.format(len(text))
        return ScreenAction.enter_mode(Mode.NORMAL)


class CutCommand(ScreenCommand):
    def execute(self, screen, action):
        text = screen.cut_selection()
        ClipboardManager.copy_text(text)
        return ScreenAction.enter_mode(Mode.NORMAL)


class SubmitCommand(ScreenCommand):
    """Base class for commands that consume a captured prompt sequence.

    The screen always returns to normal mode, whatever the outcome.
    """

    def execute(self, screen, action):
        screen.set_mode(Mode.NORMAL)
        return self._submit(screen, (action.sequence or "").strip())

    @abstractmethod
    def _submit(self, screen: 'Screen', text: str) -> Optional[ScreenAction]:
        pass


class JumpSubmitCommand(SubmitCommand):
    def _submit(self, screen, text):
        if text == "$":
            screen.move_last_line()
        elif text.isdigit():
            # Line numbers are 1-based
            screen.move_to_line(int(text) - 1)
        else:
            screen.status_message = EditorConstants.INVALID_LINE_MESSAGE.format(text)
        return None


class CommandLineSubmitCommand(SubmitCommand):
    def _submit(self, screen, text):
        name, _, argument = text.partition(" ")
        argument = argument.strip() or None
        if name == "w":
            screen.write(argument)
            return None
        if name == "wq":
            if screen.write(argument):
                return ScreenAction.quit_screen()
            return None
        if name == "q":
            if screen.buffer.modified:
                screen.status_message = EditorConstants.UNSAVED_CHANGES_MESSAGE
                return None
            return ScreenAction.quit_screen()
        if name == "q!":
            return ScreenAction.quit_screen()
        if name == "qa":
            return ScreenAction.quit_editor()
        if name == "qa!":
            return ScreenAction.quit_editor(force=True)
        if name == "e" and argument:
            return ScreenAction.open_screen(argument)
        logger.debug(f"Unknown command {text!r}")
        screen.status_message = EditorConstants.UNKNOWN_COMMAND_MESSAGE.format(text)
        return None


class FindSubmitCommand(SubmitCommand):
    def _submit(self, screen, text):
        if not screen.find_word(text):
            screen.status_message = EditorConstants.PATTERN_NOT_FOUND_MESSAGE.format(text)
        return None


class OpenSubmitCommand(SubmitCommand):
    def _submit(self, screen, text):
        if not text:
            return None
        return ScreenAction.open_screen(text)


class ModeHandler(ABC):
    """Maps the actions a mode understands to commands."""

    mode: Mode

    def __init__(self):
        self._commands: Dict[ActionType, ScreenCommand] = {}
        self._setup_default_commands()

    @abstractmethod
    def _setup_default_commands(self):
        """Register the mode's commands."""

    def register(self, action_type: ActionType, command: ScreenCommand):
        self._commands[action_type] = command

    def handle(self, screen: 'Screen', action: Action) -> Optional[ScreenAction]:
        command = self._commands.get(action.action_type)
        if command is None:
            raise UnhandledActionError(self.mode, action)
        return command.execute(screen, action)

    def _register_movement(self):
        self.register(ActionType.MOVE_LEFT, MoveLeftCommand())
        self.register(ActionType.MOVE_RIGHT, MoveRightCommand())
        self.register(ActionType.MOVE_UP, MoveUpCommand())
        self.register(ActionType.MOVE_DOWN, MoveDownCommand())
        self.register(ActionType.MOVE_START_LINE, MoveStartLineCommand())
        self.register(ActionType.MOVE_END_LINE, MoveEndLineCommand())
        self.register(ActionType.MOVE_FIRST_LINE, MoveFirstLineCommand())
        self.register(ActionType.MOVE_LAST_LINE, MoveLastLineCommand())
        self.register(ActionType.MOVE_NEXT_WORD, MoveNextWordCommand())
        self.register(ActionType.MOVE_PREV_WORD, MovePrevWordCommand())


class NormalModeHandler(ModeHandler):
    mode = Mode.NORMAL

    def _setup_default_commands(self):
        self._register_movement()
        self.register(ActionType.ENTER_NORMAL, NoOpCommand())
        self.register(ActionType.ENTER_INSERT, EnterModeCommand(Mode.INSERT))
        self.register(ActionType.ENTER_JUMP, EnterModeCommand(Mode.JUMP))
        self.register(ActionType.ENTER_COMMAND, EnterModeCommand(Mode.COMMAND))
        self.register(ActionType.ENTER_FIND, EnterModeCommand(Mode.FIND))
        self.register(ActionType.ENTER_OPEN, EnterModeCommand(Mode.OPEN))
        self.register(ActionType.ENTER_SELECT, EnterModeCommand(Mode.SELECT))
        self.register(ActionType.DELETE_CHAR, DeleteCharCommand())
        self.register(ActionType.NEW_LINE, OpenLineCommand())
        self.register(ActionType.PASTE, PasteCommand())
        self.register(ActionType.CANCEL, NoOpCommand())


class InsertModeHandler(ModeHandler):
    mode = Mode.INSERT

    def _setup_default_commands(self):
        self._register_movement()
        self.register(ActionType.INSERT_CHAR, InsertCharCommand())
        self.register(ActionType.BACKSPACE, BackspaceCommand())
        self.register(ActionType.DELETE_CHAR, DeleteCharCommand())
        self.register(ActionType.NEW_LINE, SplitLineCommand())
        self.register(ActionType.ENTER_NORMAL, EnterModeCommand(Mode.NORMAL))
        self.register(ActionType.CANCEL, EnterModeCommand(Mode.NORMAL))


class SelectModeHandler(ModeHandler):
    mode = Mode.SELECT

    def _setup_default_commands(self):
        self._register_movement()
        self.register(ActionType.YANK, YankCommand())
        self.register(ActionType.DELETE_CHAR, CutCommand())
        self.register(ActionType.ENTER_NORMAL, EnterModeCommand(Mode.NORMAL))
        self.register(ActionType.CANCEL, EnterModeCommand(Mode.NORMAL))


class PromptModeHandler(ModeHandler):
    """Modes that wait for one captured sequence, then return to normal."""

    submit_command: SubmitCommand

    def _setup_default_commands(self):
        self.register(ActionType.SUBMIT, self.submit_command)
        self.register(ActionType.ENTER_NORMAL, EnterModeCommand(Mode.NORMAL))
        self.register(ActionType.CANCEL, EnterModeCommand(Mode.NORMAL))


class JumpModeHandler(PromptModeHandler):
    mode = Mode.JUMP
    submit_command = JumpSubmitCommand()


class CommandModeHandler(PromptModeHandler):
    mode = Mode.COMMAND
    submit_command = CommandLineSubmitCommand()


class FindModeHandler(PromptModeHandler):
    mode = Mode.FIND
    submit_command = FindSubmitCommand()


class OpenModeHandler(PromptModeHandler):
    mode = Mode.OPEN
    submit_command = OpenSubmitCommand()


MODE_HANDLERS: Dict[Mode, ModeHandler] = {
    handler.mode: handler
    for handler in (
        NormalModeHandler(),
        InsertModeHandler(),
        SelectModeHandler(),
        JumpModeHandler(),
        CommandModeHandler(),
        FindModeHandler(),
        OpenModeHandler(),
    )
}


def get_mode_handler(mode: Mode) -> ModeHandler:
    """Return the handler registered for ``mode``."""
    return MODE_HANDLERS[mode]
