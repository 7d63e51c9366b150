"""File discovery utilities."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from cliptagger.state.models import SortBy

from .errors import ScanError
from .models import ScannedFile

VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".avi", ".mkv", ".webm"})

LOGGER = logging.getLogger(__name__)


def is_video_file(path: Path) -> bool:
    """Return whether ``path`` carries a known video extension (any case)."""
    return path.suffix.lower() in VIDEO_EXTENSIONS


def _created_timestamp(stat: os.stat_result) -> float:
    birthtime = getattr(stat, "st_birthtime", None)
    if birthtime is None:
        return stat.st_mtime
    return birthtime


class DirectoryScanner:
    """List the video files directly inside a directory in a chosen order."""

    def __init__(self, sort_by: SortBy = SortBy.MODIFIED_TIME) -> None:
        self.sort_by = SortBy(sort_by)

    def scan(self, directory: Path) -> list[ScannedFile]:
        """Return the sorted video files found in ``directory``.

        Subdirectories are ignored and entries that cannot be stat'ed are
        skipped. Files sharing a timestamp keep their name order, so repeated
        scans of an unchanged directory yield the same list.

        Args:
            directory: Directory to list (not recursed).

        Returns:
            list[ScannedFile]: Video files in ``sort_by`` order.

        Raises:
            ScanError: If the directory cannot be listed.
        """
        root = Path(directory).expanduser()
        try:
            entries = list(root.iterdir())
        except OSError as exc:
            raise ScanError(f"Unable to read directory {root}: {exc}") from exc

        files: list[ScannedFile] = []
        for path in entries:
            if not is_video_file(path):
                continue
            try:
                if path.is_dir():
                    continue
                stat = path.stat()
            except OSError:
                continue

            files.append(
                ScannedFile(
                    path=path,
                    name=path.name,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    created_at=datetime.fromtimestamp(_created_timestamp(stat), tz=timezone.utc),
                )
            )

        files.sort(key=lambda item: item.name)
        if self.sort_by is SortBy.MODIFIED_TIME:
            files.sort(key=lambda item: item.modified_at)
        elif self.sort_by is SortBy.CREATED_TIME:
            files.sort(key=lambda item: item.created_at)

        LOGGER.debug("Scanned %s: %d video file(s) sorted by %s", root, len(files), self.sort_by.value)
        return files

    def scan_names(self, directory: Path) -> list[str]:
        """Return only the filenames of :meth:`scan`."""
        return [item.name for item in self.scan(directory)]
