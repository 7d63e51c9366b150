"""Unit tests for configuration management."""

import logging
from pathlib import Path

import pytest

from cliptagger.config import (
    ClipTaggerConfig,
    ConfigError,
    ConfigManager,
    resolve_with_precedence,
)
from cliptagger.logging_config import LOGGER_NAME, configure_logging
from cliptagger.state import SortBy


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, **kwargs) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(**kwargs)


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".cliptagger" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "cliptagger configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, ClipTaggerConfig)
    assert config.session.autosave_interval == 5
    assert config.session.sort_by is SortBy.MODIFIED_TIME


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env = {
        "CLIPTAGGER__SESSION__AUTOSAVE_INTERVAL": "7",
        "CLIPTAGGER__LOGGING__LEVEL": "DEBUG",
    }
    manager = _fresh_manager(tmp_path, monkeypatch, env=env)
    manager.save({"session": {"autosave_interval": 3, "sort_by": "name"}})

    config = manager.load(cli_overrides={"logging.level": "INFO"})

    assert config.session.sort_by is SortBy.NAME
    # Environment beats the file, CLI beats the environment.
    assert config.session.autosave_interval == 7
    assert config.logging.level == "INFO"


def test_load_without_env_ignores_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(
        tmp_path, monkeypatch, env={"CLIPTAGGER__SESSION__AUTOSAVE_INTERVAL": "9"}
    )

    assert manager.load(include_env=False).session.autosave_interval == 5


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"session": {"autosave": 3}})

    with pytest.raises(ConfigError):
        manager.load()


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=ClipTaggerConfig(),
            file_overrides={"session": {"autosave_interval": 0}},
        )


def test_configure_logging_writes_to_file(tmp_path: Path) -> None:
    config = ClipTaggerConfig()
    config.logging.level = "INFO"
    log_path = tmp_path / "logs" / "cliptagger.log"

    logger = configure_logging(config.logging, log_path=log_path)
    logging.getLogger(f"{LOGGER_NAME}.tests").info("hello from tests")
    configure_logging(config.logging, log_path=log_path)

    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 1
    assert "hello from tests" in log_path.read_text(encoding="utf-8")
