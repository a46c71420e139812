"""Capability locator.

Maps an abstract capability (e.g. "cookie-detection") to the concrete
plugin that provides it, so dependents need not name a specific plugin.
"""

import logging
import re
from collections.abc import Sequence

from .errors import NoProviderError
from .registry import PluginRegistry

logger = logging.getLogger(__name__)

# Plugin names are usually lowercase with hyphens; anything else reads as a capability
PLUGIN_NAME_HINT = re.compile(r"^[a-z][a-z0-9-]*$")


def missing_reference_message(reference: str, chain: Sequence[str], available: Sequence[str]) -> str:
    """Describe a required reference that matches no plugin or provider."""
    trail = f"\nDependency chain: {' -> '.join(chain)}" if chain else ""
    if PLUGIN_NAME_HINT.match(reference):
        return (
            f'Plugin "{reference}" not found in registry{trail}\n'
            f"Available plugins: {', '.join(available) or '(none)'}\n"
            "Make sure the plugin has a plugin.yaml file."
        )
    return (
        f'No plugin provides capability "{reference}"{trail}\n'
        "You need to create or enable a plugin that provides this capability."
    )


class CapabilityLocator:
    """Finds providers for capabilities in a registry.

    When several plugins provide the same capability the lexicographically
    smallest name is chosen and a warning is logged.
    """

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry

    def providers(self, capability: str) -> list[str]:
        """All plugins providing capability, sorted by name."""
        return self.registry.providers_of(capability)

    def find_provider(self, capability: str) -> str:
        """Get the plugin that provides a capability.

        Args:
            capability: Capability string

        Returns:
            Name of the providing plugin

        Raises:
            NoProviderError: If no plugin provides the capability
        """
        providers = self.providers(capability)

        if not providers:
            raise NoProviderError(capability, self.registry.names())

        selected = providers[0]
        if len(providers) > 1:
            logger.warning(
                "Multiple providers for capability '%s': %s (using '%s')",
                capability,
                ", ".join(providers),
                selected,
            )
        else:
            logger.debug("Provider for capability '%s': %s", capability, selected)

        return selected
