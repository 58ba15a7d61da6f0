"""Caretedit - A grapheme-aware text editing engine for modal terminal editors."""

from .actions import Action, ActionType, ScreenAction, ScreenActionType
from .buffer import Buffer
from .editor import Editor
from .line import GraphemeIndexError, Line
from .modes import Mode, UnhandledActionError
from .position import Boundary, ScreenLocation, Size, TextPosition
from .screen import Screen

__all__ = [
    'Action',
    'ActionType',
    'Boundary',
    'Buffer',
    'Editor',
    'GraphemeIndexError',
    'Line',
    'Mode',
    'ScreenAction',
    'ScreenActionType',
    'Screen',
    'ScreenLocation',
    'Size',
    'TextPosition',
    'UnhandledActionError',
]
