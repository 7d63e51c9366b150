"""Planner turning classifications into rename operations."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from cliptagger.state.models import SessionState

from .models import RenameOperation

_PREFIX_PATTERN = re.compile(r"^\[(\d+)_(\d+)\]")


def format_number(value: int) -> str:
    """Zero-pad ``value`` to two digits; wider numbers are left as-is."""
    return f"{value:02d}"


def generate_filename(group_order: int, take_number: int, group_name: str, extension: str) -> str:
    """Return ``"[GG_TT] <group name><extension>"``.

    Args:
        group_order: Order of the group within the session.
        take_number: Take number of the file inside its group.
        group_name: Group display name.
        extension: Original extension including the dot, case preserved.

    Returns:
        str: Generated filename.
    """
    return f"[{format_number(group_order)}_{format_number(take_number)}] {group_name}{extension}"


def generate_target_path(
    directory: Path | str,
    original_path: Path | str,
    group_order: int,
    take_number: int,
    group_name: str,
) -> Path:
    """Return ``directory`` joined with the generated name for ``original_path``."""
    extension = Path(original_path).suffix
    return Path(directory) / generate_filename(group_order, take_number, group_name, extension)


def detect_conflicts(renames: Iterable[RenameOperation]) -> list[RenameOperation]:
    """Return the renames whose destination already exists on disk.

    No-op renames (source equals destination) are never conflicts. The check is
    advisory and reflects the filesystem at call time only.
    """
    return [rename for rename in renames if not rename.is_noop and rename.destination.exists()]


def detect_change_type(source: Path | str, destination: Path | str) -> str:
    """Classify a rename for display.

    Returns:
        str: ``"new"`` when the source has no ``[GG_TT]`` prefix, ``"moved"``
        when the group number changes, ``"updated"`` when only the take number
        changes, and ``""`` otherwise.
    """
    source_name = Path(source).name
    destination_name = Path(destination).name
    if source_name == destination_name:
        return ""

    source_match = _PREFIX_PATTERN.match(source_name)
    if source_match is None:
        return "new"

    destination_match = _PREFIX_PATTERN.match(destination_name)
    if destination_match is None:
        return ""
    if source_match.group(1) != destination_match.group(1):
        return "moved"
    if source_match.group(2) != destination_match.group(2):
        return "updated"
    return ""


class RenamePlanner:
    """Derive rename operations from a session state."""

    def build_plan(self, state: SessionState) -> list[RenameOperation]:
        """Return one operation per classification, in classification order.

        Classifications that reference a group which no longer exists are left
        out of the plan.

        Args:
            state: Session state to plan for.

        Returns:
            list[RenameOperation]: Planned operations, no-ops included.
        """
        directory = Path(state.directory)
        plan: list[RenameOperation] = []
        for classification in state.classifications:
            group = state.find_group_by_id(classification.group_id)
            if group is None:
                continue
            source = directory / classification.file
            destination = generate_target_path(
                directory,
                source,
                group.order,
                classification.take_number,
                group.name,
            )
            plan.append(RenameOperation(source=source, destination=destination))
        return plan

    def find_collisions(self, renames: Iterable[RenameOperation]) -> list[RenameOperation]:
        """Return planned operations that share a destination with another one."""
        by_destination: dict[Path, list[RenameOperation]] = {}
        for rename in renames:
            by_destination.setdefault(rename.destination, []).append(rename)
        return [rename for group in by_destination.values() if len(group) > 1 for rename in group]


__all__ = [
    "RenamePlanner",
    "detect_change_type",
    "detect_conflicts",
    "format_number",
    "generate_filename",
    "generate_target_path",
]
