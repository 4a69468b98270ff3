"""Configuration management for hue-console."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .color import DEFAULT_PROFILE

_LOGGER = logging.getLogger(__name__)

# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".hue_console"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

# Environment overrides
ENV_REGISTRY = "HUE_CONSOLE_REGISTRY"
ENV_PROFILE = "HUE_CONSOLE_PROFILE"


@dataclass
class ConsoleConfig:
    """Main configuration for hue-console."""

    registry_file: Optional[Path] = None
    color_profile: str = DEFAULT_PROFILE.name
    log_level: str = "WARNING"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "color_profile": self.color_profile,
            "log_level": self.log_level,
        }
        if self.registry_file:
            data["registry_file"] = str(self.registry_file)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConsoleConfig:
        """Create from dictionary."""
        registry_file = data.get("registry_file")
        return cls(
            registry_file=Path(registry_file).expanduser() if registry_file else None,
            color_profile=data.get("color_profile", DEFAULT_PROFILE.name),
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )

    @classmethod
    def load(cls, config_file: Path = DEFAULT_CONFIG_FILE) -> ConsoleConfig:
        """Load configuration from file, then apply environment overrides."""
        config = cls()
        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                config = cls.from_dict(data)
            except (OSError, yaml.YAMLError, AttributeError) as e:
                _LOGGER.warning("Failed to load config from %s: %s", config_file, e)
                config = cls()

        return config.with_environment()

    def with_environment(self) -> ConsoleConfig:
        """Return a copy with environment variables taking precedence."""
        registry_file = os.environ.get(ENV_REGISTRY)
        profile = os.environ.get(ENV_PROFILE)
        return ConsoleConfig(
            registry_file=Path(registry_file).expanduser() if registry_file else self.registry_file,
            color_profile=profile or self.color_profile,
            log_level=self.log_level,
        )
