"""Rename plan data models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class RenameOperation(BaseModel):
    """A planned change from a source path to a destination path.

    Attributes:
        source: Current path of the classified file.
        destination: Path encoding the group order, take number and group name.
    """

    source: Path
    destination: Path

    @property
    def is_noop(self) -> bool:
        """Return True when the file already carries its target name."""
        return self.source == self.destination


class ExecutionMode(str, Enum):
    """How a rename plan is applied."""

    RENAME_IN_PLACE = "rename_in_place"
    COPY_TO_DIRECTORY = "copy_to_directory"

    @property
    def label(self) -> str:
        if self is ExecutionMode.RENAME_IN_PLACE:
            return "Rename in place"
        return "Copy to new directory"


class ExecutionResult(BaseModel):
    """Outcome of running a rename plan.

    Attributes:
        mode: Execution mode that ran.
        success: Whether every operation completed.
        files_changed: Files renamed or copied (excluding no-ops).
        error: Failure description when ``success`` is False.
        output_directory: Destination directory for copy mode.
    """

    mode: ExecutionMode
    success: bool
    files_changed: int = 0
    error: Optional[str] = None
    output_directory: Optional[Path] = None


__all__ = ["RenameOperation", "ExecutionMode", "ExecutionResult"]
