"""Per-screen data for the session state machine.

Each screen is its own dataclass carrying only what that screen needs; the
``Screen`` union is the machine's current state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from cliptagger.organization.models import ExecutionMode, ExecutionResult, RenameOperation
from cliptagger.state.models import Group, SortBy

DEFAULT_VIEWPORT_HEIGHT = 10
PATH_SEPARATORS = frozenset({"/", "\\"})


def clean_group_name(text: str) -> str:
    """Drop path separators so a group name cannot leave the session directory."""
    return "".join(char for char in text if char not in PATH_SEPARATORS)


@dataclass(slots=True)
class ListCursor:
    """Selection index and scroll offset over a list shown in a fixed viewport."""

    selected: int = 0
    offset: int = 0
    viewport: int = DEFAULT_VIEWPORT_HEIGHT

    def up(self) -> None:
        if self.selected > 0:
            self.selected -= 1
            if self.selected < self.offset:
                self.offset = self.selected

    def down(self, length: int) -> None:
        if self.selected < length - 1:
            self.selected += 1
            if self.selected >= self.offset + self.viewport:
                self.offset = self.selected - self.viewport + 1

    def reset(self) -> None:
        self.selected = 0
        self.offset = 0

    def window(self, length: int) -> range:
        return range(self.offset, min(self.offset + self.viewport, length))


@dataclass(slots=True)
class StartupScreen:
    """Session summary shown before classification begins."""

    is_resume: bool
    classified_count: int
    remaining_count: int
    total_files: int
    sort_by: SortBy
    new_files_count: int = 0
    missing_files_count: int = 0
    repaired_count: int = 0


@dataclass(slots=True)
class ClassificationScreen:
    """The file currently being classified.

    Attributes:
        current_file: Filename at the cursor.
        position: 1-based cursor position for display.
        total_files: Length of the file list.
        file_path: Absolute path handed to the previewer.
        previous_group_id: Group reused by "same as previous", if any.
        previous_group_name: Display name of that group.
        classified_as: Group name when the file already has a classification.
    """

    current_file: str
    position: int
    total_files: int
    file_path: Path
    previous_group_id: Optional[str] = None
    previous_group_name: Optional[str] = None
    classified_as: Optional[str] = None

    @property
    def has_previous(self) -> bool:
        return self.previous_group_id is not None


@dataclass(slots=True)
class GroupSelectionScreen:
    """Filterable list of existing groups."""

    current_file: str
    groups: list[Group]
    filter_text: str = ""
    cursor: ListCursor = field(default_factory=ListCursor)

    @property
    def filtered(self) -> list[Group]:
        if not self.filter_text:
            return list(self.groups)
        needle = self.filter_text.lower()
        return [group for group in self.groups if needle in group.name.lower()]

    @property
    def highlighted(self) -> Optional[Group]:
        matches = self.filtered
        if 0 <= self.cursor.selected < len(matches):
            return matches[self.cursor.selected]
        return None

    def type_text(self, text: str) -> None:
        self.filter_text += text
        self.cursor.reset()

    def backspace(self) -> None:
        if self.filter_text:
            self.filter_text = self.filter_text[:-1]
            self.cursor.reset()


class InsertionStep(str, Enum):
    NAME_ENTRY = "name_entry"
    POSITION_SELECTION = "position_selection"


@dataclass(slots=True)
class GroupInsertionScreen:
    """Two-step group creation: type a name, then choose where it goes.

    Attributes:
        selected_position: Slot index, 0 = before the first group and
            ``len(existing_groups)`` = after the last.
    """

    current_file: str
    existing_groups: list[Group]
    step: InsertionStep = InsertionStep.NAME_ENTRY
    group_name: str = ""
    selected_position: int = 0

    def type_text(self, text: str) -> None:
        self.group_name += clean_group_name(text)

    def backspace(self) -> None:
        self.group_name = self.group_name[:-1]

    def begin_position_selection(self) -> bool:
        if not self.group_name.strip():
            return False
        self.step = InsertionStep.POSITION_SELECTION
        self.selected_position = len(self.existing_groups)
        return True

    def up(self) -> None:
        if self.selected_position > 0:
            self.selected_position -= 1

    def down(self) -> None:
        if self.selected_position < len(self.existing_groups):
            self.selected_position += 1


@dataclass(slots=True)
class ReviewItem:
    """One line of the review list."""

    original_name: str
    new_name: str
    skipped: bool = False
    change_type: str = ""


@dataclass(slots=True)
class ReviewScreen:
    """Planned renames and skipped files awaiting confirmation."""

    classified_count: int
    skipped_count: int
    items: list[ReviewItem] = field(default_factory=list)
    cursor: ListCursor = field(default_factory=ListCursor)


@dataclass(slots=True)
class CompleteScreen:
    """Execution mode choice, then the outcome of running the plan."""

    renames: list[RenameOperation]
    conflicts: list[RenameOperation]
    output_directory: Path
    collisions: list[RenameOperation] = field(default_factory=list)
    selected_mode: ExecutionMode = ExecutionMode.RENAME_IN_PLACE
    result: Optional[ExecutionResult] = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def pending_changes(self) -> int:
        return sum(1 for rename in self.renames if not rename.is_noop)


Screen = Union[
    StartupScreen,
    ClassificationScreen,
    GroupSelectionScreen,
    GroupInsertionScreen,
    ReviewScreen,
    CompleteScreen,
]

EXECUTION_MODES = (ExecutionMode.RENAME_IN_PLACE, ExecutionMode.COPY_TO_DIRECTORY)


__all__ = [
    "ClassificationScreen",
    "CompleteScreen",
    "EXECUTION_MODES",
    "GroupInsertionScreen",
    "GroupSelectionScreen",
    "InsertionStep",
    "ListCursor",
    "ReviewItem",
    "ReviewScreen",
    "Screen",
    "StartupScreen",
    "clean_group_name",
]
