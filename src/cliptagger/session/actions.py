"""Abstract actions accepted by the session engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cliptagger.organization.models import ExecutionMode


class ActionKind(str, Enum):
    """Identifiers for user intents, independent of the keys that produce them."""

    CONFIRM = "confirm"
    CANCEL = "cancel"
    QUIT = "quit"
    UP = "up"
    DOWN = "down"
    TYPE = "type"
    BACKSPACE = "backspace"
    SAME_AS_PREVIOUS = "same_as_previous"
    OPEN_GROUP_PICKER = "open_group_picker"
    OPEN_GROUP_CREATOR = "open_group_creator"
    SKIP = "skip"
    PREVIEW = "preview"
    PICK_GROUP = "pick_group"
    CREATE_GROUP = "create_group"
    SELECT_MODE = "select_mode"
    EXECUTE = "execute"


@dataclass(frozen=True, slots=True)
class Action:
    """A single input to :meth:`SessionEngine.dispatch`.

    Attributes:
        kind: What the user asked for.
        text: Typed characters for ``TYPE``, group name for ``CREATE_GROUP``.
        group_id: Group chosen with ``PICK_GROUP``.
        position: Insertion slot for ``CREATE_GROUP`` (0 = before the first group).
        mode: Execution mode for ``SELECT_MODE`` and ``EXECUTE``.
    """

    kind: ActionKind
    text: Optional[str] = None
    group_id: Optional[str] = None
    position: Optional[int] = None
    mode: Optional[ExecutionMode] = None

    @classmethod
    def of(cls, kind: ActionKind) -> "Action":
        return cls(kind=kind)

    @classmethod
    def typed(cls, text: str) -> "Action":
        return cls(kind=ActionKind.TYPE, text=text)

    @classmethod
    def pick(cls, group_id: str) -> "Action":
        return cls(kind=ActionKind.PICK_GROUP, group_id=group_id)

    @classmethod
    def create(cls, name: str, position: int) -> "Action":
        return cls(kind=ActionKind.CREATE_GROUP, text=name, position=position)

    @classmethod
    def select_mode(cls, mode: ExecutionMode) -> "Action":
        return cls(kind=ActionKind.SELECT_MODE, mode=mode)

    @classmethod
    def execute(cls, mode: ExecutionMode) -> "Action":
        return cls(kind=ActionKind.EXECUTE, mode=mode)


CONFIRM = Action.of(ActionKind.CONFIRM)
CANCEL = Action.of(ActionKind.CANCEL)
QUIT = Action.of(ActionKind.QUIT)
UP = Action.of(ActionKind.UP)
DOWN = Action.of(ActionKind.DOWN)
BACKSPACE = Action.of(ActionKind.BACKSPACE)
SAME_AS_PREVIOUS = Action.of(ActionKind.SAME_AS_PREVIOUS)
OPEN_GROUP_PICKER = Action.of(ActionKind.OPEN_GROUP_PICKER)
OPEN_GROUP_CREATOR = Action.of(ActionKind.OPEN_GROUP_CREATOR)
SKIP = Action.of(ActionKind.SKIP)
PREVIEW = Action.of(ActionKind.PREVIEW)


__all__ = [
    "Action",
    "ActionKind",
    "BACKSPACE",
    "CANCEL",
    "CONFIRM",
    "DOWN",
    "OPEN_GROUP_CREATOR",
    "OPEN_GROUP_PICKER",
    "PREVIEW",
    "QUIT",
    "SAME_AS_PREVIOUS",
    "SKIP",
    "UP",
]
