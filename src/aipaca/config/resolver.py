"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import AipacaConfig

# Mappings keyed by user-chosen names; their keys are never split on dots.
_FREEFORM_SECTIONS = frozenset({"profile_descriptions"})


def resolve_with_precedence(
    *,
    defaults: AipacaConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AipacaConfig:
    """Merge configuration sources: defaults < file < environment < CLI.

    Args:
        defaults: Baseline configuration model.
        file_overrides: Raw mapping read from the YAML configuration file.
        env_overrides: Nested mapping extracted from `AIPACA__*` variables.
        cli_overrides: Mapping keyed by dotted paths such as `storage.path`.

    Returns:
        AipacaConfig: Validated configuration.

    Raises:
        ConfigError: If an override is malformed or the merged data is invalid.
    """
    merged = deepcopy(defaults.model_dump(mode="python"))
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is None:
            continue
        overrides = _normalize_mapping(source, source_name=name)
        merged = _deep_merge(merged, overrides)

    try:
        return AipacaConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def _normalize_mapping(
    source: Mapping[str, Any],
    *,
    source_name: str,
    split_keys: bool = True,
) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in dict(source).items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        path = key.split(".") if split_keys and "." in key else [key]
        _assign(result, path, value, source_name=source_name)
    return result


def _assign(target: dict[str, Any], path: list[str], value: Any, *, source_name: str) -> None:
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            joined = ".".join(path)
            raise ConfigError(
                f"{source_name.capitalize()} override for {joined} conflicts with existing value."
            )
        node = existing
    leaf = path[-1]
    if isinstance(value, MappingABC):
        nested = _normalize_mapping(
            value,
            source_name=source_name,
            split_keys=leaf not in _FREEFORM_SECTIONS,
        )
        existing_leaf = node.get(leaf, {})
        if not isinstance(existing_leaf, MappingABC):
            existing_leaf = {}
        node[leaf] = _deep_merge(existing_leaf, nested)
    else:
        node[leaf] = value


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(dict(merged[key]), value)  # type: ignore[arg-type]
        else:
            # Lists such as ai_patterns are replaced wholesale, never concatenated.
            merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence"]
