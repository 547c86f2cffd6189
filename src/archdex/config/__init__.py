"""Configuration management for archdex."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import ArchdexConfig
from .resolver import ENV_PREFIX, flatten_for_env, parse_env_overrides, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.archdex/config.yaml")
_CONFIG_HEADER = (
    "# archdex configuration file\n"
    "# Manage with `archdex config set KEY --value VALUE` or `archdex config edit`.\n"
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve effective settings."""

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
        env_overrides: Mapping[str, str] | None = None,
    ) -> ArchdexConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides supplied by command options.
            include_env: Whether ``ARCHDEX__`` environment variables apply.
            ensure_file: Create the configuration file with defaults when absent.
            env_overrides: Environment mapping used instead of ``os.environ``.

        Returns:
            ArchdexConfig: Validated configuration.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_data = None
        if include_env:
            env_data = parse_env_overrides(
                env_overrides if env_overrides is not None else self._env
            )

        return resolve_with_precedence(
            defaults=ArchdexConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_data or None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk (empty when no file exists)."""
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, config: ArchdexConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, ArchdexConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self.save(ArchdexConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "ArchdexConfig",
    "resolve_with_precedence",
    "flatten_for_env",
    "parse_env_overrides",
    "ConfigError",
]
