"""Shared test fixtures for the plugin resolver.

Descriptor trees are written to ``tmp_path`` so every test gets its own
isolated plugins directory.
"""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from plugins import PluginResolver


def write_descriptor(root: Path, dirname: str, data: dict[str, Any] | str) -> Path:
    """Write ``root/dirname/plugin.yaml``; strings are written verbatim."""
    plugin_dir = root / dirname
    plugin_dir.mkdir(parents=True, exist_ok=True)
    path = plugin_dir / "plugin.yaml"
    if isinstance(data, str):
        path.write_text(data, encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def descriptor(
    name: str,
    version: str = "1.0.0",
    requires: list[Any] | None = None,
    optional: list[Any] | None = None,
    provides: list[str] | None = None,
) -> dict[str, Any]:
    """Build a descriptor mapping."""
    data: dict[str, Any] = {"name": name, "version": version}
    if provides:
        data["provides"] = provides
    deps: dict[str, Any] = {}
    if requires:
        deps["required"] = requires
    if optional:
        deps["optional"] = optional
    if deps:
        data["dependencies"] = deps
    return data


@pytest.fixture()
def plugins_root(tmp_path: Path) -> Path:
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture()
def make_resolver(plugins_root: Path) -> Callable[..., PluginResolver]:
    """Write descriptors and return a loaded resolver.

    Usage::

        resolver = make_resolver(descriptor("a", requires=["b"]), descriptor("b"))
    """

    def factory(*descriptors: dict[str, Any], **kwargs: Any) -> PluginResolver:
        for data in descriptors:
            write_descriptor(plugins_root, data["name"], data)
        resolver = PluginResolver(plugins_root, **kwargs)
        resolver.load_registry()
        return resolver

    return factory


@pytest.fixture()
def site_plugins(plugins_root: Path) -> Path:
    """A small documentation-site plugin set."""
    write_descriptor(plugins_root, "components", descriptor("components"))
    write_descriptor(plugins_root, "i18n", descriptor("i18n", version="1.4.2", provides=["translations"]))
    write_descriptor(
        plugins_root,
        "cookies-scanner",
        descriptor("cookies-scanner", provides=["cookie-detection"]),
    )
    write_descriptor(
        plugins_root,
        "cookie-consent",
        descriptor(
            "cookie-consent",
            requires=["cookie-detection", {"name": "i18n", "version": "^1.2"}],
            optional=["google-analytics"],
        ),
    )
    write_descriptor(
        plugins_root,
        "seo",
        descriptor("seo", version="2.1.0", requires=["components"], optional=["i18n"]),
    )
    write_descriptor(plugins_root, "blog", descriptor("blog", requires=["seo", "components"]))
    return plugins_root


@pytest.fixture()
def site_resolver(site_plugins: Path) -> PluginResolver:
    resolver = PluginResolver(site_plugins)
    resolver.load_registry()
    return resolver
