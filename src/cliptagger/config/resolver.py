"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ClipTaggerConfig

ENV_PREFIX = "CLIPTAGGER__"


def resolve_with_precedence(
    *,
    defaults: ClipTaggerConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> ClipTaggerConfig:
    """Layer file, environment and CLI overrides (lowest to highest) over defaults.

    Override keys may be nested mappings or dotted paths such as
    ``"session.autosave_interval"``.

    Raises:
        ConfigError: If an override is malformed or the result fails validation.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="json")
    for source_name, overrides in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if overrides is None:
            continue
        merged = deep_merge(merged, expand_dotted(overrides, source_name=source_name))

    try:
        return ClipTaggerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def env_overrides_from(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``CLIPTAGGER__SECTION__KEY`` variables into a nested mapping.

    Values are parsed as YAML scalars so ``"7"`` becomes ``7`` and ``"true"``
    becomes ``True``.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_path(overrides, segments, value)
    return overrides


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested mappings."""
    if not isinstance(source, Mapping):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, Mapping):
            value = expand_dotted(value, source_name=source_name)
        assign_path(expanded, key.split("."), value, source_name=source_name)
    return expanded


def assign_path(
    target: dict[str, Any],
    path: list[str],
    value: Any,
    *,
    source_name: str = "configuration",
) -> None:
    """Set ``value`` at ``path`` inside ``target``, creating mappings on the way.

    Raises:
        ConfigError: If a non-mapping value sits on the path.
    """
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(
                f"{source_name.capitalize()} override for {'.'.join(path)} "
                "conflicts with an existing value."
            )
        node = child
    leaf = path[-1]
    if isinstance(value, dict) and isinstance(node.get(leaf), dict):
        node[leaf] = deep_merge(node[leaf], value)
    else:
        node[leaf] = value


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``base`` with ``overrides`` merged in recursively."""
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "assign_path",
    "deep_merge",
    "env_overrides_from",
    "expand_dotted",
    "resolve_with_precedence",
]
