"""Open files in the platform's default viewer without blocking the session."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

LOGGER = logging.getLogger(__name__)


class PreviewError(Exception):
    """Raised when a file cannot be handed to the viewer."""


def preview_command(path: Path | str, platform: str | None = None) -> list[str]:
    """Return the argv that opens ``path`` on ``platform`` (``sys.platform`` by default)."""
    platform = platform or sys.platform
    target = str(path)
    if platform == "darwin":
        return ["open", target]
    if platform.startswith("win"):
        # `start` treats its first quoted argument as the window title.
        return ["cmd", "/c", "start", "", target]
    return ["xdg-open", target]


def open_file(path: Path | str, command: Optional[str] = None) -> None:
    """Launch a detached viewer for ``path``.

    The child process is reaped from a daemon thread; its exit status is ignored.

    Args:
        path: File to open.
        command: Optional viewer command line; the path is appended to it.

    Raises:
        PreviewError: If the path is empty, missing, or the viewer cannot start.
    """
    if not str(path):
        raise PreviewError("file path cannot be empty")

    target = Path(path)
    if not target.exists():
        raise PreviewError(f"file not found: {target}")

    argv: Sequence[str]
    if command:
        argv = [*shlex.split(command), str(target)]
    else:
        argv = preview_command(target)

    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        LOGGER.warning("Unable to launch %s: %s", argv[0], exc)
        raise PreviewError(f"failed to open file: {exc}") from exc

    threading.Thread(target=process.wait, name="cliptagger-preview", daemon=True).start()
    LOGGER.debug("Opened %s with %s", target, argv[0])


__all__ = ["PreviewError", "open_file", "preview_command"]
