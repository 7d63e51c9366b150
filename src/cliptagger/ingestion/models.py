"""Models describing scanned video files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel


class ScannedFile(BaseModel):
    """A video file discovered in a session directory.

    Attributes:
        path: Absolute path to the file.
        name: Bare filename, the key used by classifications.
        modified_at: Last modification time.
        created_at: Creation time, or the modification time where the platform
            does not record one.
    """

    path: Path
    name: str
    modified_at: datetime
    created_at: datetime


__all__ = ["ScannedFile"]
