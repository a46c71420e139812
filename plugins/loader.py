"""Plugin loader for discovering and parsing plugin descriptors.

Scans plugin directories and validates each plugin.yaml. A broken
descriptor only skips that plugin; the rest still load.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import MalformedDescriptorError
from .manifest import PluginManifest
from .registry import PluginRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loaded:
    """Descriptor parsed successfully."""

    manifest: PluginManifest

    @property
    def name(self) -> str:
        return self.manifest.name


@dataclass(frozen=True)
class Skipped:
    """Descriptor rejected; the plugin is left out of the registry."""

    plugin_path: Path
    reason: str


LoadOutcome = Loaded | Skipped


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "descriptor"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


class PluginLoader:
    """Loads plugin descriptors from the filesystem.

    Each immediate subdirectory of a plugin root that contains a
    plugin.yaml is one plugin. Descriptors are parsed concurrently and
    returned in discovery order.
    """

    MANIFEST_FILE = "plugin.yaml"

    def __init__(
        self,
        plugin_dirs: list[Path] | None = None,
        require_version: bool = True,
        max_workers: int = 8,
    ) -> None:
        """Initialize plugin loader.

        Args:
            plugin_dirs: Directories to scan, in priority order
            require_version: Reject descriptors without a version field
            max_workers: Upper bound on concurrent descriptor reads
        """
        self.plugin_dirs = [Path(d) for d in plugin_dirs or []]
        self.require_version = require_version
        self.max_workers = max(1, max_workers)

    def discover_plugins(self) -> list[Path]:
        """Discover all plugin directories.

        Returns:
            Plugin directories (containing plugin.yaml), roots in order,
            entries within a root sorted by name
        """
        discovered = []

        for plugin_dir in self.plugin_dirs:
            if not plugin_dir.is_dir():
                logger.warning("Plugins directory not found: %s", plugin_dir)
                continue

            for subdir in sorted(plugin_dir.iterdir()):
                if subdir.name.startswith("."):
                    continue
                try:
                    if not subdir.is_dir():
                        continue
                    if not (subdir / self.MANIFEST_FILE).is_file():
                        logger.debug("Plugin missing %s, skipping: %s", self.MANIFEST_FILE, subdir.name)
                        continue
                except OSError as e:
                    # Left to load_plugin, which reports it as skipped
                    logger.warning("Cannot inspect plugin directory %s: %s", subdir, e)
                discovered.append(subdir)
                logger.debug("Discovered plugin: %s", subdir.name)

        return discovered

    def load_manifest(self, plugin_path: Path) -> PluginManifest:
        """Load and validate plugin descriptor.

        Args:
            plugin_path: Path to plugin directory

        Returns:
            Validated PluginManifest

        Raises:
            MalformedDescriptorError: If descriptor is unreadable or invalid
        """
        manifest_path = plugin_path / self.MANIFEST_FILE

        try:
            with manifest_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise MalformedDescriptorError(f"Descriptor not found: {manifest_path}", path=str(manifest_path))
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedDescriptorError(f"Cannot read descriptor: {e}", path=str(manifest_path))
        except yaml.YAMLError as e:
            raise MalformedDescriptorError(f"Invalid YAML in descriptor: {e}", path=str(manifest_path))

        if not isinstance(data, dict):
            raise MalformedDescriptorError("Descriptor must be a mapping", path=str(manifest_path))
        if not data.get("name"):
            raise MalformedDescriptorError("Descriptor missing name", path=str(manifest_path))
        if self.require_version and data.get("version") is None:
            raise MalformedDescriptorError(
                f"Descriptor for '{data['name']}' missing version", path=str(manifest_path)
            )

        try:
            return PluginManifest.model_validate({**data, "source_path": manifest_path})
        except ValidationError as e:
            raise MalformedDescriptorError(
                f"Invalid descriptor: {_format_validation_error(e)}", path=str(manifest_path)
            )

    def load_plugin(self, plugin_path: Path) -> LoadOutcome:
        """Load a single plugin descriptor without raising.

        Args:
            plugin_path: Path to plugin directory

        Returns:
            Loaded on success, Skipped with the reason otherwise
        """
        try:
            manifest = self.load_manifest(plugin_path)
        except MalformedDescriptorError as e:
            logger.warning("Failed to load plugin %s: %s", plugin_path.name, e)
            return Skipped(plugin_path, str(e))
        except Exception as e:
            logger.error("Unexpected error loading plugin %s: %s", plugin_path.name, e)
            return Skipped(plugin_path, f"Unexpected error: {e}")

        logger.debug("Loaded plugin %s (version: %s)", manifest.name, manifest.version)
        return Loaded(manifest)

    def load_outcomes(self) -> list[LoadOutcome]:
        """Discover and parse all descriptors.

        Returns:
            One outcome per discovered plugin, in discovery order
        """
        plugin_paths = self.discover_plugins()
        logger.info("Discovered %d plugins", len(plugin_paths))

        if not plugin_paths:
            return []

        workers = min(self.max_workers, len(plugin_paths))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="plugin-loader") as pool:
            return list(pool.map(self.load_plugin, plugin_paths))

    def load_all(self) -> PluginRegistry:
        """Discover and load all plugins.

        Returns:
            PluginRegistry with all successfully parsed plugins
        """
        outcomes = self.load_outcomes()
        return PluginRegistry(o.manifest for o in outcomes if isinstance(o, Loaded))
