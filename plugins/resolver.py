"""Plugin dependency resolution.

Turns a list of requested plugin names into an activation order in
which every plugin comes after everything it requires.

Example:
    resolver = PluginResolver(Path("plugins"))
    resolver.load_registry()
    resolver.resolve(["cookie-consent"])
    # ['cookies-scanner', 'cookie-consent']
"""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .capabilities import CapabilityLocator, missing_reference_message
from .errors import (
    CircularDependencyError,
    IncompatibleVersionError,
    MissingDependencyError,
    PluginNotFoundError,
    RegistryNotLoadedError,
)
from .loader import Loaded, PluginLoader, Skipped
from .manifest import PluginManifest
from .registry import PluginRegistry
from .validator import ValidationResult, Validator
from .versions import satisfies

logger = logging.getLogger(__name__)


@dataclass
class _Run:
    """Traversal state for one resolve() call."""

    order: list[str] = field(default_factory=list)
    visited: set[str] = field(default_factory=set)
    in_progress: set[str] = field(default_factory=set)
    path: list[str] = field(default_factory=list)


class DependencyResolver:
    """Depth-first, post-order topological sort over a registry.

    Holds no per-call state, so one instance can serve concurrent calls.
    Optional dependencies are not followed.
    """

    def __init__(self, registry: PluginRegistry, locator: CapabilityLocator | None = None) -> None:
        self.registry = registry
        self.locator = locator or CapabilityLocator(registry)

    def resolve(self, requested: Sequence[str]) -> list[str]:
        """Resolve requested plugins into activation order.

        Args:
            requested: Plugin names or capabilities to activate

        Returns:
            Plugin names, dependencies first, without duplicates

        Raises:
            PluginNotFoundError: Requested name is neither a plugin nor a capability
            MissingDependencyError: Required dependency cannot be found
            CircularDependencyError: A plugin transitively requires itself
            IncompatibleVersionError: A version constraint is not met
        """
        run = _Run()
        for name in requested:
            self._visit(run, name)
        return run.order

    def _lookup(self, reference: str, parent: str | None, chain: Sequence[str]) -> str:
        if self.registry.has_plugin(reference):
            return reference
        if self.registry.providers_of(reference):
            return self.locator.find_provider(reference)

        available = self.registry.names()
        if parent is None:
            raise PluginNotFoundError(reference, available)
        raise MissingDependencyError(
            parent, reference, list(chain), missing_reference_message(reference, chain, available)
        )

    def _visit(
        self,
        run: _Run,
        reference: str,
        constraint: str | None = None,
        parent: str | None = None,
    ) -> None:
        name = self._lookup(reference, parent, run.path)

        if constraint and parent is not None:
            available = self.registry[name].version
            if not satisfies(available, constraint):
                raise IncompatibleVersionError(parent, reference, constraint, available)

        if name in run.visited:
            return

        if name in run.in_progress:
            cycle = run.path[run.path.index(name):] + [name]
            raise CircularDependencyError(cycle)

        run.in_progress.add(name)
        run.path.append(name)

        for dep in self.registry[name].required:
            self._visit(run, dep.name, dep.version, name)

        run.path.pop()
        run.in_progress.discard(name)
        run.visited.add(name)
        run.order.append(name)

        logger.debug("Plugin resolved: %s (position %d)", name, len(run.order))


class PluginResolver:
    """Plugin registry plus resolution, bound to explicit plugin roots.

    Call load_registry() once, then resolve() or validate() any number
    of times, from any thread.
    """

    def __init__(
        self,
        plugins_dir: Path | str | Sequence[Path | str],
        require_version: bool = True,
        max_workers: int = 8,
    ) -> None:
        """Initialize resolver.

        Args:
            plugins_dir: Plugin root, or several roots in priority order
            require_version: Reject descriptors without a version field
            max_workers: Upper bound on concurrent descriptor reads
        """
        if isinstance(plugins_dir, (str, Path)):
            plugins_dir = [plugins_dir]
        self.plugin_dirs = [Path(d) for d in plugins_dir]
        self.loader = PluginLoader(self.plugin_dirs, require_version=require_version, max_workers=max_workers)
        self._registry: PluginRegistry | None = None
        self._skipped: list[Skipped] = []
        self._lock = threading.Lock()

    def load_registry(self) -> None:
        """Scan plugin roots and replace the registry.

        Malformed descriptors are logged and skipped; this never raises
        for a single bad plugin. Calling it again re-scans from scratch.
        """
        logger.debug("Loading plugin registry from %s", ", ".join(str(d) for d in self.plugin_dirs))

        outcomes = self.loader.load_outcomes()
        registry = PluginRegistry(o.manifest for o in outcomes if isinstance(o, Loaded))
        skipped = [o for o in outcomes if isinstance(o, Skipped)]

        with self._lock:
            self._registry = registry
            self._skipped = skipped

        logger.info(
            "Plugin registry loaded: %d plugins (%s), %d skipped",
            len(registry),
            ", ".join(registry.names()),
            len(skipped),
        )

    @property
    def registry(self) -> PluginRegistry:
        """Loaded registry.

        Raises:
            RegistryNotLoadedError: If load_registry() has not run
        """
        registry = self._registry
        if registry is None:
            raise RegistryNotLoadedError()
        return registry

    @property
    def skipped(self) -> list[Skipped]:
        """Descriptors rejected by the last load."""
        return list(self._skipped)

    def has_plugin(self, name: str) -> bool:
        """Check if a plugin exists in the registry."""
        return self.registry.has_plugin(name)

    def get_plugin(self, name: str) -> PluginManifest:
        """Get plugin descriptor.

        Raises:
            PluginNotFoundError: If the plugin is not registered
        """
        return self.registry.get_plugin(name)

    def list_plugins(self) -> list[PluginManifest]:
        """All plugins in the registry, sorted by name."""
        return self.registry.list_plugins()

    def find_provider(self, capability: str) -> str:
        """Get the plugin providing a capability.

        Raises:
            NoProviderError: If no plugin provides it
        """
        return CapabilityLocator(self.registry).find_provider(capability)

    def resolve(self, names: Sequence[str]) -> list[str]:
        """Resolve plugin dependencies into load order.

        Args:
            names: Plugins the user wants to activate

        Returns:
            Ordered list of plugins to load

        Raises:
            PluginError: On the first unsatisfiable request
        """
        logger.info("Resolving plugin dependencies: %s", ", ".join(names))

        order = DependencyResolver(self.registry).resolve(names)

        logger.info("Dependencies resolved (%d requested, %d total): %s", len(names), len(order), " -> ".join(order))
        return order

    def validate(self, names: Sequence[str]) -> ValidationResult:
        """Check plugin dependencies without failing.

        Args:
            names: Plugins the user wants to activate

        Returns:
            ValidationResult with every error and warning found
        """
        return Validator(self.registry).validate(names)
