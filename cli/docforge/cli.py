"""docforge CLI.

Main command-line interface for the documentation site build.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from cli.commands.plugins import plugins_app
from cli.docforge.output import console
from pipeline.config import load_config

app = typer.Typer(
    name="docforge",
    help="docforge - documentation site builder",
    no_args_is_help=True,
)

app.add_typer(plugins_app, name="plugins")


@app.callback()
def callback(
    ctx: typer.Context,
    plugins_dir: Optional[list[Path]] = typer.Option(
        None,
        "--plugins-dir",
        "-d",
        help="Plugins directory (repeatable; overrides config)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.toml (default: search current and parent directories)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Load configuration and set up logging."""
    config = load_config(config_path)

    if plugins_dir:
        config.plugins.plugins_dirs = [str(d) for d in plugins_dir]

    level = logging.DEBUG if verbose else getattr(logging, config.pipeline.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ctx.obj = {"config": config}


@app.command()
def version() -> None:
    """Show docforge version."""
    from cli.docforge import __version__

    console.print(f"docforge v{__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
