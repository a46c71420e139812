"""Exceptions raised by plugin loading and dependency resolution.

Every error carries a stable ``code`` matching the diagnostic kind the
validator reports for the same condition, so callers can treat fail-fast
and fail-soft results uniformly.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validator import ValidationResult


class PluginError(Exception):
    """Base class for plugin system errors."""

    code = "plugin_error"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for reports."""
        return {"code": self.code, "message": self.message, "details": self.details}


class MalformedDescriptorError(PluginError):
    """A plugin.yaml file could not be parsed or failed validation."""

    code = "malformed_descriptor"


class RegistryNotLoadedError(PluginError):
    """Registry was queried before load_registry() ran."""

    code = "registry_not_loaded"

    def __init__(self) -> None:
        super().__init__("Plugin registry not loaded. Call load_registry() first.")


class PluginNotFoundError(PluginError, LookupError):
    """A requested plugin is not in the registry."""

    code = "not_found"

    def __init__(self, name: str, available: list[str] | None = None, message: str | None = None) -> None:
        self.plugin_name = name
        self.available = sorted(available or [])
        if message is None:
            listing = ", ".join(self.available) or "(none)"
            message = (
                f'Plugin "{name}" not found in registry.\n'
                f"Available plugins: {listing}\n"
                "Make sure the plugin has a plugin.yaml file."
            )
        super().__init__(message, plugin=name, available=self.available)


class NoProviderError(PluginNotFoundError):
    """No registered plugin provides a capability."""

    def __init__(self, capability: str, available: list[str] | None = None) -> None:
        self.capability = capability
        super().__init__(
            capability,
            available,
            message=(
                f'No plugin provides capability "{capability}".\n'
                "Create or enable a plugin that provides this capability."
            ),
        )


class MissingDependencyError(PluginNotFoundError):
    """A required dependency resolves to neither a plugin nor a provider."""

    code = "missing_dependency"

    def __init__(self, plugin: str, dependency: str, chain: list[str], message: str) -> None:
        self.dependent = plugin
        self.dependency = dependency
        self.chain = list(chain)
        super().__init__(dependency, message=message)
        self.details.update(dependent=plugin, chain=self.chain)


class CircularDependencyError(PluginError):
    """A plugin transitively requires itself."""

    code = "circular_dependency"

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        chain = " -> ".join(self.cycle)
        super().__init__(
            f"Circular dependency detected: {chain}\n"
            f'Plugin "{self.cycle[0]}" depends on itself through this chain.',
            cycle=self.cycle,
        )


class IncompatibleVersionError(PluginError):
    """A required dependency's version constraint is not met."""

    code = "incompatible_version"

    def __init__(self, plugin: str, dependency: str, required: str, available: str) -> None:
        self.plugin_name = plugin
        self.dependency = dependency
        self.required_version = required
        self.available_version = available
        super().__init__(
            f'Plugin "{plugin}" requires "{dependency}" {required}, '
            f"but version {available} is available.",
            plugin=plugin,
            dependency=dependency,
            required_version=required,
            available_version=available,
        )


class PluginValidationError(PluginError):
    """Pre-flight validation of an activation request failed."""

    code = "validation_failed"

    def __init__(self, result: "ValidationResult") -> None:
        self.result = result
        lines = [f"  - {d.plugin}: {d.message}" for d in result.errors]
        super().__init__(
            "Plugin dependency validation failed:\n" + "\n".join(lines),
            errors=[d.to_dict() for d in result.errors],
        )
