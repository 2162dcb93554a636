"""
Configuration management for op-env.

This module loads the optional YAML configuration file, which supplies
defaults for the vault, item, output format and backend. Command-line
flags always take precedence over values read here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .render import OutputFormat

DEFAULT_VAULT = "dev"
DEFAULT_ITEM = "main"
DEFAULT_BACKEND = "1password"


@dataclass
class BackendConfig:
    """Configuration for the secrets-manager backend."""

    type: str = DEFAULT_BACKEND
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class OpEnvConfig:
    """Main configuration for op-env."""

    vault: str = DEFAULT_VAULT
    item: str = DEFAULT_ITEM
    format: OutputFormat = OutputFormat.DOTENV
    backend: BackendConfig = field(default_factory=BackendConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "OpEnvConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the configuration file. If None, searches
                        for config in standard locations.

        Returns:
            An OpEnvConfig instance; defaults if no file was found.
        """
        if config_path is None:
            config_path = cls._find_config_file()

        if config_path is None or not Path(config_path).exists():
            return cls()

        return cls._parse_config_file(config_path)

    @classmethod
    def _find_config_file(cls) -> str | None:
        """Search for config file in standard locations."""
        search_paths = [
            Path.cwd() / ".op-env.yaml",
            Path.cwd() / ".op-env.yml",
            Path.cwd() / "op-env.yaml",
            Path.home() / ".config" / "op-env.yaml",
            Path.home() / ".op-env.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return str(path)

        return None

    @classmethod
    def _parse_config_file(cls, config_path: str | Path) -> "OpEnvConfig":
        """Parse a YAML configuration file."""
        path = Path(config_path)

        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in config file: {exc}") from exc

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        try:
            fmt = OutputFormat.parse(str(data.get("format") or OutputFormat.DOTENV.value))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        backend_data = data.get("backend") or {}
        if not isinstance(backend_data, dict):
            raise ConfigurationError("'backend' must be a mapping with 'type' and 'config'")

        return cls(
            vault=str(data.get("vault") or DEFAULT_VAULT),
            item=str(data.get("item") or DEFAULT_ITEM),
            format=fmt,
            backend=BackendConfig(
                type=str(backend_data.get("type") or DEFAULT_BACKEND),
                options=backend_data.get("config") or {},
            ),
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
