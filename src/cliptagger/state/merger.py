"""Reconcile persisted classifications with a fresh directory scan."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from cliptagger.organization.planner import generate_filename

from .models import Classification, SessionState

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeResult:
    """Outcome of comparing scanned filenames with classified ones.

    Attributes:
        new_files: Scanned files without a classification, in scan order.
        missing_files: Classified files absent from the scan, in
            classification order.
        existing_count: Scanned files that already have a classification.
    """

    new_files: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    existing_count: int = 0


def merge_files(state: SessionState, scanned_files: Iterable[str]) -> MergeResult:
    """Split ``scanned_files`` into new and existing, and list missing files."""
    scanned = list(scanned_files)
    classified = {classification.file for classification in state.classifications}
    present = set(scanned)

    result = MergeResult()
    for name in scanned:
        if name in classified:
            result.existing_count += 1
        else:
            result.new_files.append(name)

    for classification in state.classifications:
        if classification.file not in present:
            result.missing_files.append(classification.file)
    return result


def expected_filename(state: SessionState, classification: Classification) -> str | None:
    """Return the name the planner would give ``classification``, if its group exists."""
    group = state.find_group_by_id(classification.group_id)
    if group is None:
        return None
    extension = Path(classification.file).suffix
    return generate_filename(group.order, classification.take_number, group.name, extension)


def repair_renamed_files(state: SessionState, scanned_files: Iterable[str]) -> int:
    """Re-link missing classifications to files already renamed to their target.

    Only exact matches on the expected filename are repaired. Candidates are
    left untouched and logged when two missing classifications expect the same
    name, or when the expected name already belongs to another classification.

    Args:
        state: Session state to update in place.
        scanned_files: Filenames present in the directory.

    Returns:
        int: Number of classifications whose ``file`` was rewritten.
    """
    present = set(scanned_files)
    owned = {classification.file for classification in state.classifications}

    candidates: list[tuple[Classification, str]] = []
    for classification in state.classifications:
        if classification.file in present:
            continue
        expected = expected_filename(state, classification)
        if expected is None or expected not in present:
            continue
        candidates.append((classification, expected))

    claims = Counter(expected for _, expected in candidates)
    repaired = 0
    for classification, expected in candidates:
        if claims[expected] > 1:
            LOGGER.warning(
                "Not repairing %s: %d classifications expect %s",
                classification.file,
                claims[expected],
                expected,
            )
            continue
        if expected in owned:
            LOGGER.warning(
                "Not repairing %s: %s is already classified separately",
                classification.file,
                expected,
            )
            continue
        LOGGER.info("Repaired classification %s -> %s", classification.file, expected)
        classification.file = expected
        repaired += 1
    return repaired


def clean_missing_files(state: SessionState) -> int:
    """Drop classifications whose file no longer exists in the session directory.

    Returns:
        int: Number of classifications removed.
    """
    directory = Path(state.directory)
    kept = [
        classification
        for classification in state.classifications
        if (directory / classification.file).exists()
    ]
    removed = len(state.classifications) - len(kept)
    state.classifications = kept
    if removed:
        LOGGER.info("Removed %d missing file(s) from session state", removed)
    return removed


__all__ = [
    "MergeResult",
    "clean_missing_files",
    "expected_filename",
    "merge_files",
    "repair_renamed_files",
]
