"""Configuration models describing cliptagger settings."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cliptagger.state import DEFAULT_STATE_FILENAME
from cliptagger.state.models import SortBy


class ClipTaggerBaseModel(BaseModel):
    """Shared configuration for settings models."""

    model_config = ConfigDict(extra="forbid")


class SessionSettings(ClipTaggerBaseModel):
    """Defaults for classification sessions.

    Attributes:
        sort_by: Sort order for new sessions when no flag is given.
        autosave_interval: Classification-only actions between periodic saves.
        state_filename: Name of the sidecar file in each session directory.
        backup_on_resume: Copy the sidecar to ``.bak`` before resuming.
        output_dir_prefix: Prefix of the timestamped directory used by copy mode.
    """

    sort_by: SortBy = SortBy.MODIFIED_TIME
    autosave_interval: int = Field(default=5, ge=1)
    state_filename: str = DEFAULT_STATE_FILENAME
    backup_on_resume: bool = True
    output_dir_prefix: str = "renamed_"


class PreviewSettings(ClipTaggerBaseModel):
    """Viewer used for the preview action.

    Attributes:
        command: Command line to run instead of the platform default; the file
            path is appended as the last argument.
    """

    command: Optional[str] = None


class LoggingSettings(ClipTaggerBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Log file path; defaults to ``~/.cliptagger/cliptagger.log``.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of rotated log files to keep.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = Field(default=10, ge=1)
    backup_count: int = Field(default=5, ge=0)


class CLIOptions(ClipTaggerBaseModel):
    """CLI presentation defaults.

    Attributes:
        quiet_default: Suppress informational output of non-interactive commands.
    """

    quiet_default: bool = False


class ClipTaggerConfig(ClipTaggerBaseModel):
    """Top-level configuration."""

    session: SessionSettings = Field(default_factory=SessionSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "ClipTaggerBaseModel",
    "SessionSettings",
    "PreviewSettings",
    "LoggingSettings",
    "CLIOptions",
    "ClipTaggerConfig",
]
