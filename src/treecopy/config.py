"""Persistent default options."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from treecopy.options import DEFAULT_BUFFER_SIZE, DEFAULT_MAX_DEPTH, CopyOptions
from treecopy.types import ErrorMode

# Default config location
CONFIG_DIR = Path.home() / ".treecopy"


def _parse_yaml(text: str, source: Path | str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {source}: {e}") from e


class TreecopyConfig(BaseModel):
    """Default copy options stored in config.yaml."""

    version: str = "1.0"
    overwrite: bool = False
    follow_symlinks: bool = False
    restrict_symlinks: bool = False
    content_only: bool = False
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    error_mode: ErrorMode = ErrorMode.FAIL_FAST

    @classmethod
    def option_keys(cls) -> list[str]:
        """Names of the fields that map onto CopyOptions."""
        return [name for name in cls.model_fields if name != "version"]


class ConfigManager:
    """Loads and saves the config file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Directory for config.yaml. Defaults to ~/.treecopy.

        Note:
            Prefer using factory methods `create()` or `create_default()` for construction.
        """
        self.config_dir = config_dir or CONFIG_DIR
        self.config_file = self.config_dir / "config.yaml"

    @classmethod
    def create(cls, config_dir: Path) -> ConfigManager:
        """Create a config manager with a custom directory."""
        return cls(config_dir=config_dir)

    @classmethod
    def create_default(cls) -> ConfigManager:
        """Create a config manager for ~/.treecopy."""
        return cls()

    def load(self) -> TreecopyConfig:
        """Load config from disk.

        Returns:
            TreecopyConfig; defaults if the file does not exist.

        Raises:
            ValueError: If the file is not valid YAML or not a mapping.
            pydantic.ValidationError: If a value is invalid.
        """
        if not self.config_file.exists():
            return TreecopyConfig()

        data = _parse_yaml(self.config_file.read_text(), self.config_file) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config file: {self.config_file}")
        return TreecopyConfig.model_validate(data)

    def save(self, config: TreecopyConfig) -> None:
        """Save config to disk."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = config.model_dump(mode="json")
        self.config_file.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    def set_value(self, key: str, value: str) -> TreecopyConfig:
        """Set a single option and persist it.

        Args:
            key: Option name; dashes and underscores are interchangeable.
            value: Raw string value, parsed as YAML (so "true" and "10" work).

        Returns:
            The updated config.

        Raises:
            KeyError: If key is not a known option.
            ValueError: If value is not valid YAML.
            pydantic.ValidationError: If value is invalid for the option.
        """
        field_name = key.replace("-", "_")
        if field_name not in TreecopyConfig.option_keys():
            raise KeyError(key)

        data = self.load().model_dump()
        data[field_name] = _parse_yaml(value, key)
        config = TreecopyConfig.model_validate(data)
        self.save(config)
        return config

    def to_options(self, **overrides: Any) -> CopyOptions:
        """Build CopyOptions from the stored defaults.

        Args:
            **overrides: Option values that take precedence; None values
                are ignored so unset CLI flags keep the stored default.

        Returns:
            CopyOptions for one copy call.
        """
        data = self.load().model_dump(exclude={"version"})
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CopyOptions.model_validate(data)
