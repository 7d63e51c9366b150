"""Configuration management for cliptagger."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import ClipTaggerConfig
from .resolver import env_overrides_from, resolve_with_precedence

DEFAULT_CONFIG_DIR = Path("~/.cliptagger")
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_LOG_PATH = DEFAULT_CONFIG_DIR / "cliptagger.log"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # cliptagger configuration file
    # Manage with `cliptagger config set` or `cliptagger config edit`.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve overrides."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
    ) -> ClipTaggerConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence overrides keyed by dotted path.
            include_env: Whether ``CLIPTAGGER__*`` variables apply.
            ensure_file: Create the file with defaults when it is missing.

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid.
        """
        if ensure_file:
            self.ensure_exists()
        return resolve_with_precedence(
            defaults=ClipTaggerConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_overrides_from(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk (empty when absent).

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        if not self._config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, config: ClipTaggerConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to disk with a header and timestamp."""
        if isinstance(config, ClipTaggerConfig):
            data = config.model_dump(mode="json")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Create the configuration file with defaults if it does not exist."""
        if not self._config_path.exists():
            self.save(ClipTaggerConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the configuration file contents (empty when absent)."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")


__all__ = [
    "ConfigManager",
    "ConfigError",
    "ClipTaggerConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOG_PATH",
    "resolve_with_precedence",
]
