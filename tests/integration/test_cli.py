"""Integration tests for the docforge CLI plugin commands."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.docforge.cli import app
from tests.conftest import write_descriptor

runner = CliRunner()


@pytest.fixture()
def base_args(site_plugins: Path, tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "none.toml"), "--plugins-dir", str(site_plugins)]


def test_resolve_json(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "resolve", "cookie-consent", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == ["cookies-scanner", "i18n", "cookie-consent"]


def test_resolve_table(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "resolve", "blog"])
    assert result.exit_code == 0
    assert "components" in result.stdout
    assert "seo" in result.stdout


def test_resolve_unknown_exits_nonzero(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "resolve", "ghost"])
    assert result.exit_code == 1


def test_validate_json(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "validate", "cookie-consent", "--json"])
    assert result.exit_code == 0
    report = json.loads(result.stdout)
    assert report["valid"] is True
    assert report["warnings"][0]["type"] == "missing_optional"


def test_validate_invalid_exits_nonzero(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "validate", "ghost", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["errors"][0]["type"] == "not_found"


def test_list(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "list", "--json"])
    assert result.exit_code == 0
    names = [p["name"] for p in json.loads(result.stdout)]
    assert names == sorted(names)
    assert "cookie-consent" in names


def test_show(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "show", "cookie-consent"])
    assert result.exit_code == 0
    assert "cookies-scanner" in result.stdout


def test_show_unknown(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "show", "ghost"])
    assert result.exit_code == 1


def test_providers(base_args: list[str]) -> None:
    result = runner.invoke(app, [*base_args, "plugins", "providers", "cookie-detection"])
    assert result.exit_code == 0
    assert "cookies-scanner" in result.stdout


def test_plan_from_config(site_plugins: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
[plugins]
plugins_dirs = [{json.dumps(str(site_plugins))}]
enabled = [{{ name = "blog" }}, {{ name = "components", enabled = false }}]
"""
    )
    result = runner.invoke(app, ["--config", str(config_path), "plugins", "plan", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["order"] == ["components", "seo", "blog"]


def test_plan_invalid(tmp_path: Path, plugins_root: Path) -> None:
    write_descriptor(plugins_root, "a", {"name": "a", "version": "1.0.0", "dependencies": {"required": ["gone"]}})
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
[plugins]
plugins_dirs = [{json.dumps(str(plugins_root))}]
enabled = ["a"]
"""
    )
    result = runner.invoke(app, ["--config", str(config_path), "plugins", "plan"])
    assert result.exit_code == 1


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "docforge v" in result.stdout
