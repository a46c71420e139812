"""docforge CLI.

Command-line interface for inspecting and resolving site build plugins.
"""

__version__ = "0.1.0"

from cli.docforge.cli import app, main

__all__ = ["__version__", "app", "main"]
