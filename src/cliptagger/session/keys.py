"""Translate raw key presses into engine actions."""

from __future__ import annotations

from typing import Optional

from . import actions
from .actions import Action
from .screens import (
    ClassificationScreen,
    CompleteScreen,
    GroupInsertionScreen,
    GroupSelectionScreen,
    InsertionStep,
    ReviewScreen,
    Screen,
    StartupScreen,
)

ENTER_KEYS = frozenset({"\r", "\n"})
ESCAPE_KEY = "\x1b"
BACKSPACE_KEYS = frozenset({"\x7f", "\x08"})
UP_KEYS = frozenset({"\x1b[A", "\x1bOA", "\xe0H"})
DOWN_KEYS = frozenset({"\x1b[B", "\x1bOB", "\xe0P"})
INTERRUPT_KEY = "\x03"

_CLASSIFICATION_KEYS = {
    "1": actions.SAME_AS_PREVIOUS,
    "2": actions.OPEN_GROUP_PICKER,
    "3": actions.OPEN_GROUP_CREATOR,
    "s": actions.SKIP,
    "p": actions.PREVIEW,
    "q": actions.QUIT,
}


def action_for_key(screen: Screen, key: str) -> Optional[Action]:
    """Return the action ``key`` means on ``screen``, or None to ignore it.

    ``key`` is what :func:`click.getchar` returns: a single character or an
    escape sequence for arrow keys.
    """
    if key == INTERRUPT_KEY:
        return actions.QUIT

    if isinstance(screen, CompleteScreen) and screen.result is not None:
        return actions.QUIT

    common = _navigation_action(key)

    if isinstance(screen, StartupScreen):
        if key in ENTER_KEYS:
            return actions.CONFIRM
        if key.lower() == "q":
            return actions.QUIT
        return None

    if isinstance(screen, ClassificationScreen):
        return _CLASSIFICATION_KEYS.get(key.lower())

    if isinstance(screen, GroupSelectionScreen) or (
        isinstance(screen, GroupInsertionScreen) and screen.step is InsertionStep.NAME_ENTRY
    ):
        if common is not None:
            return common
        if key in BACKSPACE_KEYS:
            return actions.BACKSPACE
        if len(key) == 1 and key.isprintable():
            return Action.typed(key)
        return None

    if isinstance(screen, (GroupInsertionScreen, ReviewScreen, CompleteScreen)):
        if common is not None:
            return common
        if key.lower() == "q":
            return actions.QUIT
    return None


def _navigation_action(key: str) -> Optional[Action]:
    if key in ENTER_KEYS:
        return actions.CONFIRM
    if key == ESCAPE_KEY:
        return actions.CANCEL
    if key in UP_KEYS:
        return actions.UP
    if key in DOWN_KEYS:
        return actions.DOWN
    return None


__all__ = ["action_for_key"]
