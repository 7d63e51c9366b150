"""Interactive classification session."""

from .actions import Action, ActionKind
from .engine import SessionEngine, StepResult, build_startup_screen, prepare_session
from .keys import action_for_key
from .render import display_name, render
from .runtime import run_interactive
from .screens import (
    ClassificationScreen,
    CompleteScreen,
    GroupInsertionScreen,
    GroupSelectionScreen,
    InsertionStep,
    ListCursor,
    ReviewItem,
    ReviewScreen,
    Screen,
    StartupScreen,
)

__all__ = [
    "Action",
    "ActionKind",
    "ClassificationScreen",
    "CompleteScreen",
    "GroupInsertionScreen",
    "GroupSelectionScreen",
    "InsertionStep",
    "ListCursor",
    "ReviewItem",
    "ReviewScreen",
    "Screen",
    "SessionEngine",
    "StartupScreen",
    "StepResult",
    "action_for_key",
    "build_startup_screen",
    "display_name",
    "prepare_session",
    "render",
    "run_interactive",
]
