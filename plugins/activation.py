"""Activation planning for a site build.

Combines validation and resolution for the plugin list configured by
the user: disabled entries are dropped, the rest are validated as a
whole, and only then resolved into the order the build activates them.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from .errors import PluginValidationError
from .resolver import PluginResolver
from .validator import Diagnostic

logger = logging.getLogger(__name__)


class ActivationEntry(BaseModel):
    """One configured plugin: ``{name, enabled, config}``."""

    name: str = Field(..., description="Plugin name or capability")
    enabled: bool = Field(True, description="Whether to activate the plugin")
    config: dict[str, Any] = Field(default_factory=dict, description="Plugin settings")


@dataclass
class ActivationPlan:
    """Resolved activation order with per-plugin settings."""

    order: list[str] = field(default_factory=list)
    configs: dict[str, dict[str, Any]] = field(default_factory=dict)
    warnings: list[Diagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[str]:
        return iter(self.order)


def plan_activation(
    resolver: PluginResolver,
    entries: list[ActivationEntry | dict[str, Any]],
) -> ActivationPlan:
    """Validate and resolve configured plugins.

    Args:
        resolver: Resolver with a loaded registry
        entries: Configured plugins, in user order

    Returns:
        ActivationPlan covering requested plugins and their dependencies

    Raises:
        PluginValidationError: If validation reports any error
        PluginError: If resolution fails after validation passed
    """
    parsed = [e if isinstance(e, ActivationEntry) else ActivationEntry(**e) for e in entries]
    enabled = [e for e in parsed if e.enabled]

    if not enabled:
        logger.info("No plugins enabled")
        return ActivationPlan()

    names = [e.name for e in enabled]
    validation = resolver.validate(names)

    if not validation.valid:
        for error in validation.errors:
            logger.error('Plugin "%s": %s', error.plugin, error.message)
        raise PluginValidationError(validation)

    for warning in validation.warnings:
        logger.warning('Plugin "%s": %s', warning.plugin, warning.message)

    order = resolver.resolve(names)

    # Entries naming a capability configure its provider
    configured = {
        e.name if resolver.has_plugin(e.name) else resolver.find_provider(e.name): e.config for e in enabled
    }
    configs = {name: dict(configured.get(name, {})) for name in order}

    logger.info("Plugin load order calculated: %s", " -> ".join(order))
    return ActivationPlan(order=order, configs=configs, warnings=list(validation.warnings))
