"""CLI command modules for docforge."""

from cli.commands.plugins import plugins_app

__all__ = ["plugins_app"]
