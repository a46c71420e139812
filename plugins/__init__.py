"""Plugin dependency resolution for the documentation site build.

Reads plugin descriptors from a local directory tree and computes the
order in which plugins must be activated.

Plugin Structure:
    plugins/
    └── cookie-consent/
        ├── plugin.yaml        # Descriptor with metadata and dependencies
        └── index.js           # Plugin code (not read here)

Example plugin.yaml:
    name: cookie-consent
    version: 1.0.0
    description: GDPR cookie banner

    provides: [consent-banner]

    dependencies:
      required:
        - cookie-detection            # capability or plugin name
        - name: i18n
          version: ^1.2
      optional:
        - google-analytics
"""

from .activation import ActivationEntry, ActivationPlan, plan_activation
from .capabilities import CapabilityLocator
from .errors import (
    CircularDependencyError,
    IncompatibleVersionError,
    MalformedDescriptorError,
    MissingDependencyError,
    NoProviderError,
    PluginError,
    PluginNotFoundError,
    PluginValidationError,
    RegistryNotLoadedError,
)
from .loader import Loaded, PluginLoader, Skipped
from .manifest import DependencySpec, PluginDependencies, PluginManifest
from .registry import PluginRegistry
from .resolver import DependencyResolver, PluginResolver
from .validator import Diagnostic, DiagnosticKind, ValidationResult, Validator

__all__ = [
    "ActivationEntry",
    "ActivationPlan",
    "CapabilityLocator",
    "CircularDependencyError",
    "DependencyResolver",
    "DependencySpec",
    "Diagnostic",
    "DiagnosticKind",
    "IncompatibleVersionError",
    "Loaded",
    "MalformedDescriptorError",
    "MissingDependencyError",
    "NoProviderError",
    "PluginDependencies",
    "PluginError",
    "PluginLoader",
    "PluginManifest",
    "PluginNotFoundError",
    "PluginRegistry",
    "PluginResolver",
    "PluginValidationError",
    "RegistryNotLoadedError",
    "Skipped",
    "ValidationResult",
    "Validator",
    "plan_activation",
]
