"""Configuration management for the site build.

Loads configuration from:
1. config.toml (defaults)
2. Environment variables (overrides)
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import load_dotenv

if TYPE_CHECKING:
    from plugins import ActivationEntry, PluginResolver

# Load .env file if present
load_dotenv()


@dataclass
class PipelineConfig:
    """Build pipeline configuration."""

    log_level: str = "INFO"


@dataclass
class PluginsConfig:
    """Plugin discovery and activation configuration.

    Plugins live one per subdirectory of each plugins directory, each
    described by a plugin.yaml.
    """

    plugins_dirs: list[str] = field(default_factory=lambda: ["plugins"])  # Earlier dirs win on name conflicts
    require_version: bool = True  # Skip descriptors without a version
    max_workers: int = 8  # Concurrent descriptor reads
    enabled: list[dict[str, Any]] = field(default_factory=list)  # [{name, enabled, config}]

    def activation_entries(self) -> list["ActivationEntry"]:
        """Configured plugins as activation entries."""
        from plugins import ActivationEntry

        entries = []
        for item in self.enabled:
            # Bare names are shorthand for {name = "..."}
            entries.append(ActivationEntry(name=item) if isinstance(item, str) else ActivationEntry(**item))
        return entries

    def create_resolver(self) -> "PluginResolver":
        """Create a resolver for the configured plugin directories."""
        from plugins import PluginResolver

        return PluginResolver(
            [Path(d).expanduser() for d in self.plugins_dirs],
            require_version=self.require_version,
            max_workers=self.max_workers,
        )


@dataclass
class Config:
    """Main configuration container."""

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    plugins: PluginsConfig = field(default_factory=PluginsConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        pipeline_data = data.get("pipeline", {})
        plugins_data = data.get("plugins", {})

        return cls(
            pipeline=PipelineConfig(**pipeline_data),
            plugins=PluginsConfig(**plugins_data),
        )


def find_config_file() -> Path | None:
    """Find config.toml in current or parent directories.

    Returns:
        Path to config.toml or None if not found.
    """
    current = Path.cwd()

    for directory in [current, *current.parents]:
        config_path = directory / "config.toml"
        if config_path.exists():
            return config_path

    return None


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional explicit path to config.toml

    Returns:
        Config object with merged settings.
    """
    # Start with defaults
    config_data: dict[str, Any] = {}

    # Load from file if available
    if config_path is None:
        config_path = find_config_file()

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path, "rb") as f:
                config_data = tomllib.load(f)

    plugins_dir = os.getenv("PLUGINS_DIR")

    # Apply environment variable overrides
    env_overrides = {
        "pipeline": {
            "log_level": os.getenv("LOG_LEVEL"),
        },
        "plugins": {
            "plugins_dirs": plugins_dir.split(os.pathsep) if plugins_dir else None,
            "require_version": _bool_or_none(os.getenv("PLUGINS_REQUIRE_VERSION")),
            "max_workers": _int_or_none(os.getenv("PLUGINS_MAX_WORKERS")),
        },
    }

    # Merge env overrides (only non-None values)
    for section, values in env_overrides.items():
        if section not in config_data:
            config_data[section] = {}
        for key, value in values.items():
            if value is not None:
                config_data[section][key] = value

    return Config.from_dict(config_data)


def _int_or_none(value: str | None) -> int | None:
    """Convert string to int, or return None."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _bool_or_none(value: str | None) -> bool | None:
    """Convert a truthy/falsy string to bool, or return None."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None

