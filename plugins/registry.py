"""Plugin registry.

Immutable catalog of loaded descriptors keyed by plugin name. Built once
by the loader; resolution code only reads from it.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .errors import PluginNotFoundError
from .manifest import PluginManifest

logger = logging.getLogger(__name__)


class PluginRegistry(Mapping[str, PluginManifest]):
    """Read-only mapping of plugin name to descriptor.

    Duplicate names are rejected while building: the first descriptor
    wins and the conflict is logged.
    """

    def __init__(self, manifests: Iterable[PluginManifest] = ()) -> None:
        """Build registry from descriptors in priority order.

        Args:
            manifests: Descriptors, earliest wins on name conflicts
        """
        plugins: dict[str, PluginManifest] = {}
        for manifest in manifests:
            existing = plugins.get(manifest.name)
            if existing is not None:
                logger.warning(
                    "Duplicate plugin '%s' at %s ignored (already loaded from %s)",
                    manifest.name,
                    manifest.source_path,
                    existing.source_path,
                )
                continue
            plugins[manifest.name] = manifest
            logger.debug("Registered plugin: %s (version: %s)", manifest.name, manifest.version)

        self._plugins = MappingProxyType(plugins)

    def __getitem__(self, name: str) -> PluginManifest:
        return self._plugins[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._plugins)

    def __len__(self) -> int:
        """Number of registered plugins."""
        return len(self._plugins)

    def __repr__(self) -> str:
        return f"PluginRegistry(plugins={self.names()})"

    def has_plugin(self, name: str) -> bool:
        """Check if a plugin is registered."""
        return name in self._plugins

    def get_plugin(self, name: str) -> PluginManifest:
        """Get a plugin by name.

        Args:
            name: Plugin name

        Returns:
            Plugin descriptor

        Raises:
            PluginNotFoundError: If no plugin is registered under name
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginNotFoundError(name, list(self._plugins)) from None

    def names(self) -> list[str]:
        """Sorted list of registered plugin names."""
        return sorted(self._plugins)

    def list_plugins(self) -> list[PluginManifest]:
        """All descriptors sorted by name."""
        return [self._plugins[name] for name in self.names()]

    def providers_of(self, capability: str) -> list[str]:
        """Names of plugins providing a capability, sorted."""
        return sorted(name for name, p in self._plugins.items() if capability in p.provides)

    def dependents_of(self, name: str) -> list[str]:
        """Plugins that directly list name as a required or optional dependency."""
        return sorted(
            plugin.name
            for plugin in self._plugins.values()
            if any(dep.name == name for dep in (*plugin.required, *plugin.optional))
        )

    def dependency_graph(self) -> dict[str, list[str]]:
        """Map each plugin to its declared required references.

        References are reported as written; capabilities are not resolved.
        """
        return {name: [dep.name for dep in self._plugins[name].required] for name in self.names()}
