"""Session data models and the classification store invariants."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class SortBy(str, Enum):
    """Ordering applied to scanned files."""

    NAME = "name"
    MODIFIED_TIME = "modified_time"
    CREATED_TIME = "created_time"


class Group(BaseModel):
    """Named, ordered bucket that classified files are assigned to.

    Attributes:
        id: Opaque identifier generated once; stable across renames.
        name: Display name, also used in generated filenames.
        order: 1-based position among all groups of the session.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    order: int = Field(ge=1)


class Classification(BaseModel):
    """Association of one file with one group and one take number."""

    file: str
    group_id: str
    take_number: int = Field(ge=1)


class SessionState(BaseModel):
    """Complete persisted record of a classification session.

    Attributes:
        directory: Directory holding the video files.
        sort_by: Sort order used when scanning the directory.
        current_index: Resume cursor into the scanned file list.
        groups: Groups ordered by their ``order`` value.
        classifications: Classified files in assignment order.
        skipped: Files explicitly deferred by the user.
    """

    directory: str
    sort_by: SortBy = SortBy.MODIFIED_TIME
    current_index: int = Field(default=0, ge=0)
    groups: List[Group] = Field(default_factory=list)
    classifications: List[Classification] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)

    @classmethod
    def new(cls, directory: str, sort_by: SortBy = SortBy.MODIFIED_TIME) -> "SessionState":
        """Return an empty session for ``directory``."""
        return cls(directory=directory, sort_by=sort_by)

    def new_group(self, name: str, order: int) -> Group:
        """Create a group with a fresh identifier (not yet inserted)."""
        return Group(name=name, order=order)

    def find_group_by_id(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def get_classification(self, filename: str) -> Optional[Classification]:
        for classification in self.classifications:
            if classification.file == filename:
                return classification
        return None

    def is_classified(self, filename: str) -> bool:
        return self.get_classification(filename) is not None

    def next_take_number(self, group_id: str) -> int:
        """Return the next take number for ``group_id``.

        Take numbers are never compacted, so gaps left by reclassified files
        remain and the next number is always one past the current maximum.
        """
        highest = 0
        for classification in self.classifications:
            if classification.group_id == group_id and classification.take_number > highest:
                highest = classification.take_number
        return highest + 1

    def add_or_update_classification(self, filename: str, group_id: str) -> Classification:
        """Assign ``filename`` to ``group_id``, replacing any prior assignment.

        Args:
            filename: Bare filename relative to the session directory.
            group_id: Identifier of the target group.

        Returns:
            Classification: Newly appended classification.
        """
        self._remove_classification(filename)
        if filename in self.skipped:
            self.skipped = [name for name in self.skipped if name != filename]

        classification = Classification(
            file=filename,
            group_id=group_id,
            take_number=self.next_take_number(group_id),
        )
        self.classifications.append(classification)
        return classification

    def skip_file(self, filename: str) -> None:
        """Record ``filename`` as skipped, dropping any classification it had."""
        self._remove_classification(filename)
        if filename not in self.skipped:
            self.skipped.append(filename)

    def insert_group_at_position(self, group: Group, order: int) -> None:
        """Insert ``group`` at the slot implied by ``order`` and renumber.

        The group lands before the first existing group whose order is at least
        ``order`` (or at the end), after which every group is renumbered to the
        dense sequence ``1..N`` in list order.
        """
        index = len(self.groups)
        for position, existing in enumerate(self.groups):
            if existing.order >= order:
                index = position
                break

        self.groups.insert(index, group)
        for position, existing in enumerate(self.groups, start=1):
            existing.order = position

    def _remove_classification(self, filename: str) -> None:
        for index, classification in enumerate(self.classifications):
            if classification.file == filename:
                del self.classifications[index]
                return


__all__ = ["SortBy", "Group", "Classification", "SessionState"]
