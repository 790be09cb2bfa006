"""Configuration loading for aipaca.

The configuration file lives at `~/.aipaca.yaml` unless `--config` names
another path. `aipaca init` writes it once with every default spelled out;
afterwards it is only read. Values resolve as defaults < file < `AIPACA__*`
environment variables < command-line overrides.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError, MissingConfigError
from .models import DEFAULT_CONFIG_PATH, AipacaConfig
from .resolver import resolve_with_precedence

ENV_PREFIX = "AIPACA__"

_HEADER_LINES = (
    "# aipaca configuration file, written by `aipaca init`.",
    "# ai_patterns are matched against each repository root, in order.",
    "# Any key can be overridden with AIPACA__SECTION__KEY environment variables.",
)


class ConfigManager:
    """Locate, create, and load the aipaca configuration file."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = Path(config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def exists(self) -> bool:
        return self._config_path.is_file()

    def ensure_exists(self) -> Path:
        """Write a configuration file holding every default unless one exists.

        Raises:
            ConfigError: If the file cannot be written.
        """
        if self.exists():
            return self._config_path

        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(AipacaConfig().model_dump(mode="python"), sort_keys=False)
        text = "\n".join((*_HEADER_LINES, f"# Created: {stamp}", "")) + body
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            self._config_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Could not write config file {self._config_path}: {exc}") from exc
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        require_file: bool = True,
    ) -> AipacaConfig:
        """Resolve the configuration from every source.

        Args:
            cli_overrides: Dotted-key overrides with the highest precedence.
            include_env: Whether `AIPACA__*` environment variables are applied.
            require_file: Raise when the configuration file is missing.

        Returns:
            AipacaConfig: Validated configuration bound to this file path.

        Raises:
            MissingConfigError: If `require_file` is set and no file exists.
            ConfigError: If the file or an override is invalid.
        """
        if require_file and not self.exists():
            raise MissingConfigError(
                f"Config file not found at {self._config_path}; run `aipaca init` first."
            )

        config = resolve_with_precedence(
            defaults=AipacaConfig(),
            file_overrides=self._read_file(),
            env_overrides=env_overrides(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )
        config.bind_config_file(self._config_path)
        return config

    def _read_file(self) -> dict[str, Any] | None:
        if not self.exists():
            return None
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {self._config_path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Could not read {self._config_path}: {exc}") from exc

        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw


def env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Return the nested overrides named by `AIPACA__SECTION__KEY` variables.

    Values are parsed as YAML so `AIPACA__CLI__QUIET_DEFAULT=true` yields a
    boolean; unparsable values are kept as plain strings.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in sorted(env.items()):
        if not key.startswith(ENV_PREFIX):
            continue
        path = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not path:
            continue
        try:
            value: Any = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value

        node = overrides
        for segment in path[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = node[segment] = {}
            node = child
        node[path[-1]] = value
    return overrides


__all__ = [
    "AipacaConfig",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "MissingConfigError",
    "env_overrides",
    "resolve_with_precedence",
]
