"""Errors raised while executing rename plans."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import RenameOperation


class ExecutionError(Exception):
    """Raised when a rename or copy stops partway through a batch.

    Attributes:
        operation: Operation that failed.
        applied: Operations completed before the failure, in plan order.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: "RenameOperation",
        applied: Sequence["RenameOperation"],
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.applied = list(applied)
