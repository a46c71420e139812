"""Plugin descriptor schema.

Defines the structure of plugin.yaml files: plugin identity, the
capabilities a plugin provides, and its required and optional
prerequisites.
"""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .versions import parse_version, to_specifier

NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")
DEFAULT_VERSION = "0.0.0"


class DependencySpec(BaseModel):
    """Reference to a plugin or capability, with an optional version constraint.

    In YAML either a bare string or a mapping::

        - cookies-scanner
        - name: i18n
          version: ^1.2
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Plugin name or capability")
    version: str | None = Field(None, description="Version constraint")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        """Require a non-empty reference."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("dependency name must be a non-empty string")
        return v.strip()

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> str | None:
        """Reject constraints that cannot be parsed."""
        if v is None:
            return None
        # Unquoted YAML numbers lose digits: 1.10 loads as 1.1
        if not isinstance(v, str):
            raise ValueError("version constraint must be a string (quote it in YAML)")
        v = v.strip()
        to_specifier(v)
        return v

    def __str__(self) -> str:
        return f"{self.name} {self.version}" if self.version else self.name


def _coerce_specs(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, (str, dict)):
        value = [value]
    return tuple({"name": item} if isinstance(item, str) else item for item in value)


class PluginDependencies(BaseModel):
    """Required and optional prerequisites, in declaration order."""

    model_config = ConfigDict(frozen=True)

    required: tuple[DependencySpec, ...] = ()
    optional: tuple[DependencySpec, ...] = ()

    @field_validator("required", "optional", mode="before")
    @classmethod
    def coerce(cls, v: Any) -> Any:
        """Accept bare names alongside {name, version} mappings."""
        return _coerce_specs(v)


class PluginManifest(BaseModel):
    """Plugin descriptor (plugin.yaml)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Metadata
    name: str = Field(..., description="Plugin name (alphanumeric, dashes, underscores)")
    version: str = Field(DEFAULT_VERSION, description="Semantic version (e.g., 1.0.0)")
    description: str = Field("", description="Plugin description")
    author: str = Field("", description="Plugin author")

    # Graph
    provides: frozenset[str] = Field(
        default_factory=frozenset,
        description="Capabilities this plugin exposes to dependents",
    )
    dependencies: PluginDependencies = Field(default_factory=PluginDependencies)

    # Diagnostics only
    source_path: Path | None = Field(None, description="Descriptor file this was loaded from")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        """Validate plugin name format."""
        if not isinstance(v, str) or not NAME_PATTERN.match(v):
            raise ValueError("name must start with letter and contain only alphanumeric, dashes, underscores")
        return v

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> str:
        """Validate semantic version format."""
        if v is None:
            return DEFAULT_VERSION
        if not isinstance(v, str):
            raise ValueError("version must be a string (quote it in YAML)")
        if not re.match(r"^\d+(\.\d+)*", v):
            raise ValueError("version must be semantic (e.g., 1.0.0)")
        parse_version(v)
        return v

    @field_validator("provides", mode="before")
    @classmethod
    def validate_provides(cls, v: Any) -> Any:
        """Normalize capability lists."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            return frozenset([v])
        return frozenset(v)

    @field_validator("dependencies", mode="before")
    @classmethod
    def validate_dependencies(cls, v: Any) -> Any:
        """Treat an empty ``dependencies:`` key as no dependencies."""
        return {} if v is None else v

    @property
    def required(self) -> tuple[DependencySpec, ...]:
        """Required dependencies."""
        return self.dependencies.required

    @property
    def optional(self) -> tuple[DependencySpec, ...]:
        """Optional dependencies."""
        return self.dependencies.optional

    @property
    def plugin_path(self) -> Path | None:
        """Plugin directory."""
        return self.source_path.parent if self.source_path else None

    def provides_capability(self, capability: str) -> bool:
        """Check whether this plugin exposes a capability."""
        return capability in self.provides
