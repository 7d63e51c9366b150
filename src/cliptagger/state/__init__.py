"""Session state persistence for cliptagger."""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path

from pydantic import ValidationError

from .errors import MissingStateError, StateError
from .models import Classification, Group, SessionState, SortBy

DEFAULT_STATE_FILENAME = ".clip-tagger-state.json"
BACKUP_SUFFIX = ".bak"

LOGGER = logging.getLogger(__name__)


class StateRepository:
    """Persist session state in a sidecar file inside the session directory."""

    def __init__(self, filename: str = DEFAULT_STATE_FILENAME) -> None:
        """Initialize the repository with an optional sidecar filename.

        Args:
            filename: Name of the JSON file stored next to the videos.
        """
        self._filename = filename

    @property
    def filename(self) -> str:
        """Return the sidecar filename.

        Returns:
            str: Name of the state file within a session directory.
        """
        return self._filename

    def state_path(self, directory: Path) -> Path:
        """Return the path of the sidecar file for ``directory``."""
        return Path(directory) / self._filename

    def backup_path(self, directory: Path) -> Path:
        """Return the path of the backup copy for ``directory``."""
        primary = self.state_path(directory)
        return primary.with_name(primary.name + BACKUP_SUFFIX)

    def exists(self, directory: Path) -> bool:
        """Return whether a sidecar file is present for ``directory``."""
        return self.state_path(directory).is_file()

    def load(self, directory: Path) -> SessionState:
        """Load the session state persisted for ``directory``.

        Args:
            directory: Session directory containing the sidecar file.

        Returns:
            SessionState: Deserialized session state.

        Raises:
            MissingStateError: If no sidecar file is present.
            StateError: If the stored data cannot be read or parsed.
        """
        return self.load_file(self.state_path(directory))

    def load_file(self, path: Path) -> SessionState:
        """Load session state from an explicit file such as a backup.

        Args:
            path: JSON document written by :meth:`save`.

        Returns:
            SessionState: Deserialized session state.

        Raises:
            MissingStateError: If ``path`` does not exist.
            StateError: If the stored data cannot be read or parsed.
        """
        if not path.exists():
            raise MissingStateError(f"No session state found at {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8", errors="surrogateescape"))
        except OSError as exc:
            raise StateError(f"Unable to read session state {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StateError(f"Invalid session state data: {exc}") from exc

        try:
            return SessionState.model_validate(data)
        except ValidationError as exc:
            raise StateError(f"Invalid session state data: {exc}") from exc

    def save(self, directory: Path, state: SessionState) -> Path:
        """Persist ``state`` to the sidecar file of ``directory``.

        Args:
            directory: Session directory that receives the sidecar file.
            state: Session state to serialize.

        Returns:
            Path: Location of the written file.

        Raises:
            StateError: If the file cannot be written.
        """
        path = self.state_path(directory)
        payload = state.model_dump(mode="json")
        try:
            path.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False),
                encoding="utf-8",
                errors="surrogateescape",
            )
        except OSError as exc:
            raise StateError(f"Unable to write session state {path}: {exc}") from exc
        LOGGER.debug(
            "Saved session state to %s (%d classifications, cursor=%d)",
            path,
            len(state.classifications),
            state.current_index,
        )
        return path

    def backup(self, directory: Path) -> Path:
        """Copy the sidecar file byte for byte to its ``.bak`` sibling.

        Args:
            directory: Session directory containing the sidecar file.

        Returns:
            Path: Location of the backup copy.

        Raises:
            MissingStateError: If there is no sidecar file to back up.
            StateError: If the copy fails.
        """
        primary = self.state_path(directory)
        if not primary.is_file():
            raise MissingStateError(f"Cannot back up missing session state {primary}")

        target = self.backup_path(directory)
        try:
            shutil.copyfile(primary, target)
        except OSError as exc:
            raise StateError(f"Unable to back up session state: {exc}") from exc
        LOGGER.info("Backed up session state to %s", target)
        return target

    def reset(self, directory: Path) -> bool:
        """Delete the sidecar file of ``directory``.

        Returns:
            bool: True when a file was removed, False when none existed.

        Raises:
            StateError: If the file exists but cannot be removed.
        """
        path = self.state_path(directory)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise StateError(f"Unable to delete session state {path}: {exc}") from exc
        LOGGER.info("Deleted session state %s", path)
        return True


__all__ = [
    "StateRepository",
    "DEFAULT_STATE_FILENAME",
    "BACKUP_SUFFIX",
    "SessionState",
    "Group",
    "Classification",
    "SortBy",
    "StateError",
    "MissingStateError",
]
