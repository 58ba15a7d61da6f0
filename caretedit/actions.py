"""Abstract editing actions received from the modal dispatcher."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .modes import Mode


class ActionType(Enum):
    """Kinds of action a screen can apply."""
    # Basic movement
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_START_LINE = "move_start_line"
    MOVE_END_LINE = "move_end_line"
    MOVE_FIRST_LINE = "move_first_line"
    MOVE_LAST_LINE = "move_last_line"
    MOVE_NEXT_WORD = "move_next_word"
    MOVE_PREV_WORD = "move_prev_word"
    # Mode changes
    ENTER_NORMAL = "enter_normal"
    ENTER_INSERT = "enter_insert"
    ENTER_JUMP = "enter_jump"
    ENTER_COMMAND = "enter_command"
    ENTER_FIND = "enter_find"
    ENTER_OPEN = "enter_open"
    ENTER_SELECT = "enter_select"
    # Editing
    INSERT_CHAR = "insert_char"
    DELETE_CHAR = "delete_char"
    BACKSPACE = "backspace"
    NEW_LINE = "new_line"
    YANK = "yank"
    PASTE = "paste"
    # Prompt modes
    SUBMIT = "submit"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Action:
    """An action plus at most one parameter.

    ``repeat`` is a count prefix (0 or None means once), ``character`` a
    single typed character, ``sequence`` a captured string such as a line
    number, command or path.
    """
    action_type: ActionType
    repeat: Optional[int] = None
    character: Optional[str] = None
    sequence: Optional[str] = None

    def __post_init__(self):
        given = [p for p in (self.repeat, self.character, self.sequence) if p is not None]
        if len(given) > 1:
            raise ValueError(f"{self.action_type.value} takes at most one parameter")
        if self.character is not None and len(self.character) != 1:
            raise ValueError(f"Expected a single character, got {self.character!r}")
        if self.action_type is ActionType.INSERT_CHAR and self.character is None:
            raise ValueError("insert_char needs a character")
        if self.repeat is not None and self.repeat < 0:
            raise ValueError(f"Repeat count must not be negative: {self.repeat}")

    @property
    def count(self) -> int:
        """How many times to apply the action."""
        return self.repeat if self.repeat else 1


class ScreenActionType(Enum):
    """What the owner of a screen should do next."""
    ENTER_MODE = "enter_mode"
    OPEN_SCREEN = "open_screen"
    QUIT_SCREEN = "quit_screen"
    QUIT_EDITOR = "quit_editor"


@dataclass(frozen=True)
class ScreenAction:
    action_type: ScreenActionType
    mode: Optional["Mode"] = None
    path: Optional[Path] = None
    force: bool = False

    @classmethod
    def enter_mode(cls, mode: "Mode") -> "ScreenAction":
        return cls(ScreenActionType.ENTER_MODE, mode=mode)

    @classmethod
    def open_screen(cls, path) -> "ScreenAction":
        return cls(ScreenActionType.OPEN_SCREEN, path=Path(path))

    @classmethod
    def quit_screen(cls) -> "ScreenAction":
        return cls(ScreenActionType.QUIT_SCREEN)

    @classmethod
    def quit_editor(cls, force: bool = False) -> "ScreenAction":
        return cls(ScreenActionType.QUIT_EDITOR, force=force)
