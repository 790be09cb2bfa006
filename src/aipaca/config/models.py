"""Configuration models describing aipaca settings."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

DEFAULT_CONFIG_PATH = Path("~/.aipaca.yaml")

DEFAULT_AI_PATTERNS: List[str] = [
    ".claude",
    ".claude/**",
    ".cursor",
    ".cursor/**",
    "CLAUDE.md",
    "**/CLAUDE.md",
    "ai/",
    "ai/**",
    ".ai*",
]


class AipacaBaseModel(BaseModel):
    """Shared configuration for aipaca Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(AipacaBaseModel):
    """Location of the profile/backup storage root.

    Attributes:
        path: Storage root; a leading `~` expands to the user's home directory.
    """

    path: str = "~/.aipaca"


class LoggingSettings(AipacaBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(AipacaBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        status_backup_limit: Number of backups listed by `aipaca status`.
        prune_keep_default: Backups kept by `aipaca backups prune` without `--keep`.
    """

    quiet_default: bool = False
    status_backup_limit: int = 5
    prune_keep_default: int = 5


class AipacaConfig(AipacaBaseModel):
    """Top-level configuration struct for aipaca.

    Attributes:
        version: Configuration format version.
        storage: Storage root settings.
        ai_patterns: Ordered glob patterns identifying AI files in a repository.
        default_profile: Profile name used by `aipaca init --import`.
        profile_descriptions: Free-form description per profile name.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    version: str = "1"
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ai_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_AI_PATTERNS))
    default_profile: str = "default"
    profile_descriptions: Dict[str, str] = Field(default_factory=dict)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)

    _config_file: Path | None = PrivateAttr(default=None)

    @property
    def storage_root(self) -> Path:
        """Return the storage root with `~` expanded."""
        return Path(self.storage.path).expanduser()

    @property
    def profiles_path(self) -> Path:
        return self.storage_root / "profiles"

    @property
    def backups_path(self) -> Path:
        return self.storage_root / "backups"

    @property
    def state_path(self) -> Path:
        return self.storage_root / "state"

    @property
    def config_file(self) -> Path:
        """Return the file this configuration was loaded from."""
        return self._config_file or DEFAULT_CONFIG_PATH.expanduser()

    def bind_config_file(self, path: Path) -> None:
        self._config_file = Path(path).expanduser()

    @property
    def reserved_paths(self) -> tuple[Path, ...]:
        """Return paths aipaca owns, which never count as a repository's AI files."""
        return (self.storage_root, self.config_file)


__all__ = [
    "AipacaBaseModel",
    "AipacaConfig",
    "CLIOptions",
    "DEFAULT_AI_PATTERNS",
    "DEFAULT_CONFIG_PATH",
    "LoggingSettings",
    "StorageSettings",
]
