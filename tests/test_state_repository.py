"""State repository tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cliptagger.state import (
    DEFAULT_STATE_FILENAME,
    MissingStateError,
    SessionState,
    SortBy,
    StateError,
    StateRepository,
)


def _state(tmp_path: Path) -> SessionState:
    """Return a sample session with one group, one classification and one skip.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        SessionState: Populated session state.
    """
    state = SessionState.new(str(tmp_path), SortBy.NAME)
    group = state.new_group("intro", 1)
    state.insert_group_at_position(group, 1)
    state.add_or_update_classification("a.mp4", group.id)
    state.skip_file("b.mp4")
    state.current_index = 2
    return state


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    """Ensure save followed by load returns an equal session state.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository()
    state = _state(tmp_path)

    path = repo.save(tmp_path, state)
    loaded = repo.load(tmp_path)

    assert path == tmp_path / DEFAULT_STATE_FILENAME
    assert loaded == state


def test_round_trip_preserves_empty_lists(tmp_path: Path) -> None:
    repo = StateRepository()
    state = SessionState.new(str(tmp_path))

    repo.save(tmp_path, state)
    loaded = repo.load(tmp_path)

    assert loaded == state
    assert loaded.groups == [] and loaded.classifications == [] and loaded.skipped == []


def test_non_ascii_filenames_are_written_verbatim(tmp_path: Path) -> None:
    repo = StateRepository()
    state = SessionState.new(str(tmp_path))
    group = state.new_group("intro", 1)
    state.insert_group_at_position(group, 1)
    state.add_or_update_classification("café.mp4", group.id)

    path = repo.save(tmp_path, state)

    text = path.read_text(encoding="utf-8")
    assert '"file": "café.mp4"' in text
    assert "\\u00e9" not in text
    assert repo.load(tmp_path) == state


def test_undecodable_filename_bytes_round_trip(tmp_path: Path) -> None:
    repo = StateRepository()
    name = b"clip\xff.mp4".decode("utf-8", "surrogateescape")
    state = SessionState.new(str(tmp_path))
    state.skip_file(name)

    path = repo.save(tmp_path, state)

    assert b'"clip\xff.mp4"' in path.read_bytes()
    assert repo.load(tmp_path).skipped == [name]


def test_saved_document_uses_expected_keys(tmp_path: Path) -> None:
    repo = StateRepository()
    repo.save(tmp_path, _state(tmp_path))

    text = (tmp_path / DEFAULT_STATE_FILENAME).read_text(encoding="utf-8")
    payload = json.loads(text)

    assert set(payload) == {
        "directory",
        "sort_by",
        "current_index",
        "groups",
        "classifications",
        "skipped",
    }
    assert payload["sort_by"] == "name"
    assert set(payload["groups"][0]) == {"id", "name", "order"}
    assert set(payload["classifications"][0]) == {"file", "group_id", "take_number"}
    assert '\n  "directory"' in text


def test_load_missing_state_raises(tmp_path: Path) -> None:
    """Verify loading without state raises MissingStateError.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository()

    with pytest.raises(MissingStateError):
        repo.load(tmp_path)


def test_load_invalid_state_raises(tmp_path: Path) -> None:
    """Ensure an invalid JSON payload raises StateError on load.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    repo = StateRepository()
    (tmp_path / DEFAULT_STATE_FILENAME).write_text("not json", encoding="utf-8")

    with pytest.raises(StateError):
        repo.load(tmp_path)


def test_load_rejects_invalid_values(tmp_path: Path) -> None:
    repo = StateRepository()
    (tmp_path / DEFAULT_STATE_FILENAME).write_text(
        json.dumps({"directory": str(tmp_path), "sort_by": "size"}), encoding="utf-8"
    )

    with pytest.raises(StateError):
        repo.load(tmp_path)


def test_save_into_missing_directory_raises(tmp_path: Path) -> None:
    repo = StateRepository()
    missing = tmp_path / "gone"

    with pytest.raises(StateError):
        repo.save(missing, SessionState.new(str(missing)))


def test_backup_copies_state_byte_for_byte(tmp_path: Path) -> None:
    repo = StateRepository()
    repo.save(tmp_path, _state(tmp_path))

    backup = repo.backup(tmp_path)

    assert backup == tmp_path / f"{DEFAULT_STATE_FILENAME}.bak"
    assert backup.read_bytes() == repo.state_path(tmp_path).read_bytes()
    assert repo.load_file(backup) == repo.load(tmp_path)


def test_backup_without_state_raises(tmp_path: Path) -> None:
    repo = StateRepository()

    with pytest.raises(MissingStateError):
        repo.backup(tmp_path)


def test_reset_removes_state(tmp_path: Path) -> None:
    repo = StateRepository()
    repo.save(tmp_path, _state(tmp_path))

    assert repo.reset(tmp_path) is True
    assert not repo.exists(tmp_path)
    assert repo.reset(tmp_path) is False


def test_custom_filename(tmp_path: Path) -> None:
    repo = StateRepository("session.json")
    repo.save(tmp_path, _state(tmp_path))

    assert (tmp_path / "session.json").exists()
    assert repo.exists(tmp_path)
    assert not StateRepository().exists(tmp_path)
