"""Executor for rename plans."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

from .errors import ExecutionError
from .models import ExecutionMode, ExecutionResult, RenameOperation

LOGGER = logging.getLogger(__name__)


class OperationExecutor:
    """Apply rename plans either in place or by copying into a new directory.

    Operations run strictly in plan order. A failure stops the batch without
    undoing earlier operations; the raised :class:`ExecutionError` lists what
    was already applied.
    """

    def rename_in_place(self, renames: Iterable[RenameOperation]) -> list[RenameOperation]:
        """Rename each file to its destination inside the session directory.

        Args:
            renames: Planned operations; no-ops are skipped.

        Returns:
            list[RenameOperation]: Operations that were applied.

        Raises:
            ExecutionError: On the first rename that fails.
        """
        applied: list[RenameOperation] = []
        for rename_op in renames:
            if rename_op.is_noop:
                continue
            try:
                os.rename(rename_op.source, rename_op.destination)
            except OSError as exc:
                raise ExecutionError(
                    f"rename {rename_op.source.name} -> {rename_op.destination.name}: {exc}",
                    operation=rename_op,
                    applied=applied,
                ) from exc
            applied.append(rename_op)
        LOGGER.info("Renamed %d file(s) in place", len(applied))
        return applied

    def copy_to_directory(
        self,
        renames: Iterable[RenameOperation],
        output_dir: Path,
    ) -> list[RenameOperation]:
        """Copy each source into ``output_dir`` under its destination name.

        Sources are left untouched. A partially written copy is left behind if
        the process dies mid-file.

        Args:
            renames: Planned operations; no-ops are skipped.
            output_dir: Directory receiving the copies, created when missing.

        Returns:
            list[RenameOperation]: Operations whose destination is the copied file.

        Raises:
            ExecutionError: If the directory cannot be created or a copy fails.
        """
        pending = [rename_op for rename_op in renames if not rename_op.is_noop]
        applied: list[RenameOperation] = []
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            if not pending:
                raise
            raise ExecutionError(
                f"create output directory {output_dir}: {exc}",
                operation=pending[0],
                applied=applied,
            ) from exc

        for rename_op in pending:
            target = output_dir / rename_op.destination.name
            try:
                self._copy_file(rename_op.source, target)
            except OSError as exc:
                raise ExecutionError(
                    f"copy {rename_op.source.name} -> {target.name}: {exc}",
                    operation=rename_op,
                    applied=applied,
                ) from exc
            applied.append(RenameOperation(source=rename_op.source, destination=target))
        LOGGER.info("Copied %d file(s) into %s", len(applied), output_dir)
        return applied

    def execute(
        self,
        renames: list[RenameOperation],
        mode: ExecutionMode,
        *,
        output_dir: Path | None = None,
    ) -> tuple[ExecutionResult, list[RenameOperation]]:
        """Run ``renames`` in ``mode`` and summarize the outcome.

        Failures are reported in the returned result instead of raised.

        Returns:
            tuple[ExecutionResult, list[RenameOperation]]: Summary and the
            operations that were applied before any failure.
        """
        planned = sum(1 for rename_op in renames if not rename_op.is_noop)
        try:
            if mode is ExecutionMode.RENAME_IN_PLACE:
                applied = self.rename_in_place(renames)
            else:
                if output_dir is None:
                    raise ValueError("Copy mode requires an output directory.")
                applied = self.copy_to_directory(renames, output_dir)
        except ExecutionError as exc:
            LOGGER.error("%s stopped after %d file(s): %s", mode.label, len(exc.applied), exc)
            result = ExecutionResult(
                mode=mode,
                success=False,
                files_changed=len(exc.applied),
                error=str(exc),
                output_directory=output_dir,
            )
            return result, exc.applied
        except OSError as exc:
            LOGGER.error("%s failed: %s", mode.label, exc)
            result = ExecutionResult(
                mode=mode, success=False, error=str(exc), output_directory=output_dir
            )
            return result, []

        result = ExecutionResult(
            mode=mode,
            success=True,
            files_changed=planned,
            output_directory=output_dir,
        )
        return result, applied

    def _copy_file(self, source: Path, target: Path) -> None:
        with source.open("rb") as reader, target.open("wb") as writer:
            shutil.copyfileobj(reader, writer)
            writer.flush()
            os.fsync(writer.fileno())
