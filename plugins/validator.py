"""Pre-flight validation of plugin requests.

Walks the same dependency graph as the resolver but collects every
problem instead of stopping at the first one, so a user sees the full
report before committing to a build.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .capabilities import PLUGIN_NAME_HINT
from .registry import PluginRegistry
from .versions import satisfies

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Kinds of validation findings."""

    # Errors
    NOT_FOUND = "not_found"
    MISSING_DEPENDENCY = "missing_dependency"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    INCOMPATIBLE_VERSION = "incompatible_version"

    # Warnings
    MISSING_OPTIONAL = "missing_optional"
    AMBIGUOUS_PROVIDER = "ambiguous_provider"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding."""

    kind: DiagnosticKind
    plugin: str
    message: str
    dependency: str | None = None
    required_version: str | None = None
    available_version: str | None = None
    chain: tuple[str, ...] = ()

    @property
    def type(self) -> str:
        """Kind as a plain string."""
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting empty context fields."""
        data: dict[str, Any] = {"type": self.kind.value, "plugin": self.plugin, "message": self.message}
        if self.dependency is not None:
            data["dependency"] = self.dependency
        if self.required_version is not None:
            data["required_version"] = self.required_version
        if self.available_version is not None:
            data["available_version"] = self.available_version
        if self.chain:
            data["chain"] = list(self.chain)
        return data


@dataclass
class ValidationResult:
    """Errors and warnings found for a request."""

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True when there are no errors; warnings do not count."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
        }


@dataclass
class _Run:
    result: ValidationResult = field(default_factory=ValidationResult)
    visited: set[str] = field(default_factory=set)
    in_progress: set[str] = field(default_factory=set)
    path: list[str] = field(default_factory=list)
    ambiguous: set[str] = field(default_factory=set)


class Validator:
    """Fail-soft counterpart of DependencyResolver.

    Never raises for an unsatisfiable request; each problem becomes a
    Diagnostic and traversal continues where it can.
    """

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry

    def validate(self, requested: Sequence[str]) -> ValidationResult:
        """Validate requested plugins and everything they require.

        Args:
            requested: Plugin names or capabilities to activate

        Returns:
            ValidationResult (valid is False if any error was recorded)
        """
        run = _Run()
        for name in requested:
            self._check(run, name)

        result = run.result
        logger.debug(
            "Validated %d requested plugins: %d errors, %d warnings",
            len(requested),
            len(result.errors),
            len(result.warnings),
        )
        return result

    def _lookup(self, run: _Run, reference: str, requester: str) -> str | None:
        if self.registry.has_plugin(reference):
            return reference

        providers = self.registry.providers_of(reference)
        if not providers:
            return None

        if len(providers) > 1 and reference not in run.ambiguous:
            run.ambiguous.add(reference)
            run.result.warnings.append(
                Diagnostic(
                    kind=DiagnosticKind.AMBIGUOUS_PROVIDER,
                    plugin=requester,
                    message=(
                        f'Capability "{reference}" has multiple providers '
                        f"({', '.join(providers)}); using \"{providers[0]}\""
                    ),
                    dependency=reference,
                )
            )
        return providers[0]

    def _check(
        self,
        run: _Run,
        reference: str,
        constraint: str | None = None,
        parent: str | None = None,
    ) -> None:
        result = run.result
        name = self._lookup(run, reference, parent or reference)

        if name is None:
            if parent is None:
                result.errors.append(
                    Diagnostic(
                        kind=DiagnosticKind.NOT_FOUND,
                        plugin=reference,
                        message=f'Plugin "{reference}" not found in registry',
                    )
                )
            else:
                what = "dependency" if PLUGIN_NAME_HINT.match(reference) else "capability"
                result.errors.append(
                    Diagnostic(
                        kind=DiagnosticKind.MISSING_DEPENDENCY,
                        plugin=parent,
                        message=f'Required {what} "{reference}" not found',
                        dependency=reference,
                        chain=tuple(run.path),
                    )
                )
            return

        if constraint and parent is not None:
            available = self.registry[name].version
            if not satisfies(available, constraint):
                result.errors.append(
                    Diagnostic(
                        kind=DiagnosticKind.INCOMPATIBLE_VERSION,
                        plugin=parent,
                        message=(
                            f'Requires "{reference}" {constraint}, but version {available} is available'
                        ),
                        dependency=reference,
                        required_version=constraint,
                        available_version=available,
                    )
                )

        if name in run.visited:
            return

        if name in run.in_progress:
            cycle = run.path[run.path.index(name):] + [name]
            result.errors.append(
                Diagnostic(
                    kind=DiagnosticKind.CIRCULAR_DEPENDENCY,
                    plugin=name,
                    message=f"Circular dependency detected: {' -> '.join(cycle)}",
                    dependency=parent,
                    chain=tuple(cycle),
                )
            )
            return

        run.in_progress.add(name)
        run.path.append(name)

        manifest = self.registry[name]
        for dep in manifest.required:
            self._check(run, dep.name, dep.version, name)

        for dep in manifest.optional:
            if not self.registry.has_plugin(dep.name) and not self.registry.providers_of(dep.name):
                result.warnings.append(
                    Diagnostic(
                        kind=DiagnosticKind.MISSING_OPTIONAL,
                        plugin=name,
                        message=f'Optional dependency "{dep.name}" not available',
                        dependency=dep.name,
                    )
                )

        run.path.pop()
        run.in_progress.discard(name)
        run.visited.add(name)
