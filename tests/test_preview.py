"""Tests for the external file previewer."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from cliptagger import preview
from cliptagger.preview import PreviewError, open_file, preview_command


class _FakeProcess:
    def __init__(self, argv: list[str], **kwargs: Any) -> None:
        self.argv = argv
        self.kwargs = kwargs

    def wait(self) -> int:
        return 0


def test_preview_command_per_platform() -> None:
    assert preview_command("/v/a.mp4", "darwin") == ["open", "/v/a.mp4"]
    assert preview_command("/v/a.mp4", "linux") == ["xdg-open", "/v/a.mp4"]
    assert preview_command("C:/v/a.mp4", "win32") == ["cmd", "/c", "start", "", "C:/v/a.mp4"]


def test_open_file_rejects_empty_path() -> None:
    with pytest.raises(PreviewError):
        open_file("")


def test_open_file_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PreviewError):
        open_file(tmp_path / "missing.mp4")


def test_open_file_launches_detached_viewer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "a.mp4"
    target.write_bytes(b"")
    launched: list[_FakeProcess] = []

    def _popen(argv: list[str], **kwargs: Any) -> _FakeProcess:
        process = _FakeProcess(argv, **kwargs)
        launched.append(process)
        return process

    monkeypatch.setattr(preview.subprocess, "Popen", _popen)

    open_file(target, command="mpv --really-quiet")

    assert launched[0].argv == ["mpv", "--really-quiet", str(target)]
    assert launched[0].kwargs["stdout"] is subprocess.DEVNULL
    assert launched[0].kwargs["start_new_session"] is True


def test_open_file_wraps_launch_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "a.mp4"
    target.write_bytes(b"")

    def _popen(argv: list[str], **kwargs: Any) -> _FakeProcess:
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(preview.subprocess, "Popen", _popen)

    with pytest.raises(PreviewError):
        open_file(target)
