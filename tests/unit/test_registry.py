"""Unit tests for plugins.registry and plugins.capabilities."""
from __future__ import annotations

import logging

import pytest

from plugins.capabilities import CapabilityLocator, missing_reference_message
from plugins.errors import NoProviderError, PluginNotFoundError
from plugins.manifest import PluginManifest
from plugins.registry import PluginRegistry


def _registry(*manifests: PluginManifest) -> PluginRegistry:
    return PluginRegistry(manifests)


@pytest.fixture()
def registry() -> PluginRegistry:
    return _registry(
        PluginManifest(name="seo", dependencies={"required": ["components"], "optional": ["i18n"]}),
        PluginManifest(name="components"),
        PluginManifest(name="blog", dependencies={"required": ["seo", "components"]}),
        PluginManifest(name="zeta-scanner", provides=["cookie-detection"]),
        PluginManifest(name="alpha-scanner", provides=["cookie-detection", "tracking"]),
    )


class TestPluginRegistry:
    def test_has_and_get(self, registry: PluginRegistry) -> None:
        assert registry.has_plugin("seo")
        assert not registry.has_plugin("ghost")
        assert registry.get_plugin("seo").name == "seo"

    def test_get_missing_raises_not_found(self, registry: PluginRegistry) -> None:
        with pytest.raises(PluginNotFoundError) as info:
            registry.get_plugin("ghost")
        assert info.value.plugin_name == "ghost"
        assert info.value.code == "not_found"
        assert "ghost" in str(info.value)
        assert "components" in str(info.value)

    def test_not_found_is_lookup_error(self, registry: PluginRegistry) -> None:
        with pytest.raises(LookupError):
            registry.get_plugin("ghost")

    def test_mapping_protocol(self, registry: PluginRegistry) -> None:
        assert len(registry) == 5
        assert "blog" in registry
        assert set(registry) == {"seo", "components", "blog", "zeta-scanner", "alpha-scanner"}

    def test_read_only(self, registry: PluginRegistry) -> None:
        with pytest.raises(TypeError):
            registry["new"] = PluginManifest(name="new")  # type: ignore[index]

    def test_names_sorted(self, registry: PluginRegistry) -> None:
        assert registry.names() == ["alpha-scanner", "blog", "components", "seo", "zeta-scanner"]
        assert [p.name for p in registry.list_plugins()] == registry.names()

    def test_duplicate_first_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="plugins.registry"):
            registry = _registry(
                PluginManifest(name="seo", version="1.0.0"),
                PluginManifest(name="seo", version="2.0.0"),
            )
        assert len(registry) == 1
        assert registry["seo"].version == "1.0.0"
        assert "Duplicate plugin 'seo'" in caplog.text

    def test_providers_of(self, registry: PluginRegistry) -> None:
        assert registry.providers_of("cookie-detection") == ["alpha-scanner", "zeta-scanner"]
        assert registry.providers_of("nothing") == []

    def test_dependents_of(self, registry: PluginRegistry) -> None:
        assert registry.dependents_of("components") == ["blog", "seo"]
        assert registry.dependents_of("i18n") == ["seo"]

    def test_dependency_graph(self, registry: PluginRegistry) -> None:
        graph = registry.dependency_graph()
        assert graph["blog"] == ["seo", "components"]
        assert graph["components"] == []


class TestCapabilityLocator:
    def test_single_provider(self, registry: PluginRegistry) -> None:
        assert CapabilityLocator(registry).find_provider("tracking") == "alpha-scanner"

    def test_multiple_providers_pick_smallest_name(
        self, registry: PluginRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="plugins.capabilities"):
            provider = CapabilityLocator(registry).find_provider("cookie-detection")
        assert provider == "alpha-scanner"
        assert "Multiple providers" in caplog.text

    def test_no_provider(self, registry: PluginRegistry) -> None:
        with pytest.raises(NoProviderError, match="payment_gateway") as info:
            CapabilityLocator(registry).find_provider("payment_gateway")
        assert info.value.capability == "payment_gateway"
        assert isinstance(info.value, PluginNotFoundError)


class TestMissingReferenceMessage:
    def test_plugin_like_name(self) -> None:
        message = missing_reference_message("missing-plugin", ["a", "b"], ["a", "b"])
        assert 'Plugin "missing-plugin" not found in registry' in message
        assert "Dependency chain: a -> b" in message

    def test_capability_like_name(self) -> None:
        message = missing_reference_message("payment_gateway", [], [])
        assert 'No plugin provides capability "payment_gateway"' in message
