"""Tests for applying rename plans."""

from __future__ import annotations

from pathlib import Path

import pytest

from cliptagger.organization import (
    ExecutionError,
    ExecutionMode,
    OperationExecutor,
    RenameOperation,
)


def _file(path: Path, content: bytes = b"video") -> Path:
    path.write_bytes(content)
    return path


def test_rename_in_place_moves_files(tmp_path: Path) -> None:
    source = _file(tmp_path / "a.mp4")
    destination = tmp_path / "[01_01] intro.mp4"

    applied = OperationExecutor().rename_in_place(
        [RenameOperation(source=source, destination=destination)]
    )

    assert len(applied) == 1
    assert not source.exists()
    assert destination.read_bytes() == b"video"


def test_rename_in_place_skips_noops(tmp_path: Path) -> None:
    same = _file(tmp_path / "[01_01] intro.mp4")

    applied = OperationExecutor().rename_in_place([RenameOperation(source=same, destination=same)])

    assert applied == []
    assert same.exists()


def test_rename_in_place_stops_at_first_failure(tmp_path: Path) -> None:
    first = _file(tmp_path / "a.mp4")
    renames = [
        RenameOperation(source=first, destination=tmp_path / "[01_01] intro.mp4"),
        RenameOperation(source=tmp_path / "missing.mp4", destination=tmp_path / "[01_02] x.mp4"),
        RenameOperation(source=_file(tmp_path / "c.mp4"), destination=tmp_path / "[01_03] x.mp4"),
    ]

    with pytest.raises(ExecutionError) as excinfo:
        OperationExecutor().rename_in_place(renames)

    assert excinfo.value.applied == renames[:1]
    assert excinfo.value.operation == renames[1]
    assert (tmp_path / "[01_01] intro.mp4").exists()
    assert (tmp_path / "c.mp4").exists()


def test_copy_to_directory_leaves_sources(tmp_path: Path) -> None:
    source = _file(tmp_path / "a.mp4", b"frames")
    output = tmp_path / "renamed_2024-01-01_00-00-00"

    applied = OperationExecutor().copy_to_directory(
        [RenameOperation(source=source, destination=tmp_path / "[01_01] intro.mp4")],
        output,
    )

    assert source.exists()
    assert (output / "[01_01] intro.mp4").read_bytes() == b"frames"
    assert applied[0].destination == output / "[01_01] intro.mp4"
    assert not (tmp_path / "[01_01] intro.mp4").exists()


def test_execute_reports_success(tmp_path: Path) -> None:
    same = _file(tmp_path / "[01_02] intro.mp4")
    renames = [
        RenameOperation(source=_file(tmp_path / "a.mp4"), destination=tmp_path / "[01_01] intro.mp4"),
        RenameOperation(source=same, destination=same),
    ]

    result, applied = OperationExecutor().execute(renames, ExecutionMode.RENAME_IN_PLACE)

    assert result.success
    assert result.files_changed == 1
    assert result.error is None
    assert len(applied) == 1


def test_execute_reports_partial_failure(tmp_path: Path) -> None:
    renames = [
        RenameOperation(source=_file(tmp_path / "a.mp4"), destination=tmp_path / "[01_01] a.mp4"),
        RenameOperation(source=tmp_path / "gone.mp4", destination=tmp_path / "[01_02] a.mp4"),
    ]

    result, applied = OperationExecutor().execute(renames, ExecutionMode.RENAME_IN_PLACE)

    assert not result.success
    assert result.files_changed == 1
    assert "gone.mp4" in (result.error or "")
    assert [op.source.name for op in applied] == ["a.mp4"]


def test_execute_copy_records_output_directory(tmp_path: Path) -> None:
    output = tmp_path / "out"
    renames = [
        RenameOperation(source=_file(tmp_path / "a.mp4"), destination=tmp_path / "[01_01] a.mp4")
    ]

    result, _ = OperationExecutor().execute(
        renames, ExecutionMode.COPY_TO_DIRECTORY, output_dir=output
    )

    assert result.success
    assert result.output_directory == output
    assert (output / "[01_01] a.mp4").exists()
