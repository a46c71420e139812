"""Rich console output utilities for the docforge CLI."""

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from plugins import Diagnostic, PluginManifest, PluginRegistry, Skipped, ValidationResult

console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]→[/blue] {message}")


def print_json(data: Any) -> None:
    """Print formatted JSON."""
    import json

    console.print_json(json.dumps(data, indent=2, default=str))


def print_plugins(plugins: list[PluginManifest]) -> None:
    """Print registered plugins as a table."""
    if not plugins:
        print_info("No plugins found.")
        return

    table = Table(title="Plugins", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Provides", style="green")
    table.add_column("Requires")
    table.add_column("Optional", style="dim")

    for plugin in plugins:
        table.add_row(
            plugin.name,
            plugin.version,
            ", ".join(sorted(plugin.provides)) or "-",
            ", ".join(str(d) for d in plugin.required) or "-",
            ", ".join(str(d) for d in plugin.optional) or "-",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(plugins)} plugins[/dim]")


def print_skipped(skipped: list[Skipped]) -> None:
    """Print descriptors rejected during loading."""
    for item in skipped:
        print_warning(f"Skipped {item.plugin_path}: {item.reason}")


def print_plugin_detail(plugin: PluginManifest, registry: PluginRegistry) -> None:
    """Print one plugin with its dependency tree."""
    console.print(f"\n[bold cyan]{plugin.name}[/bold cyan] v{plugin.version}")
    if plugin.author:
        console.print(f"[dim]by {plugin.author}[/dim]")
    if plugin.description:
        console.print(f"\n{plugin.description}")
    if plugin.source_path:
        console.print(f"\n[dim]{plugin.source_path}[/dim]")

    if plugin.provides:
        console.print("\n[bold]Provides[/bold]")
        for capability in sorted(plugin.provides):
            console.print(f"  - {capability}")

    tree = Tree(f"[bold]{plugin.name}[/bold]")
    _add_requirements(tree, plugin, registry, {plugin.name})
    console.print("\n[bold]Requires[/bold]")
    console.print(tree)

    if plugin.optional:
        console.print("\n[bold]Optional[/bold]")
        for dep in plugin.optional:
            available = dep.name in registry or registry.providers_of(dep.name)
            mark = "[green]✓[/green]" if available else "[yellow]![/yellow]"
            console.print(f"  {mark} {dep}")

    dependents = registry.dependents_of(plugin.name)
    if dependents:
        console.print(f"\n[bold]Used by[/bold]: {', '.join(dependents)}")


def _add_requirements(node: Tree, plugin: PluginManifest, registry: PluginRegistry, seen: set[str]) -> None:
    for dep in plugin.required:
        if dep.name in registry:
            target = dep.name
            label = f"[cyan]{dep}[/cyan]"
        else:
            providers = registry.providers_of(dep.name)
            if not providers:
                node.add(f"[red]{dep} (missing)[/red]")
                continue
            target = providers[0]
            label = f"[green]{dep}[/green] [dim]→ {target}[/dim]"

        if target in seen:
            node.add(f"{label} [red](cycle)[/red]")
            continue
        child = node.add(label)
        _add_requirements(child, registry[target], registry, seen | {target})


def print_order(order: list[str]) -> None:
    """Print a resolved activation order."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Plugin", style="cyan")

    for i, name in enumerate(order, 1):
        table.add_row(str(i), name)

    console.print(table)


def _diagnostic_row(diagnostic: Diagnostic) -> tuple[str, str, str]:
    detail = diagnostic.message
    if diagnostic.chain:
        detail += f" [dim]({' -> '.join(diagnostic.chain)})[/dim]"
    return diagnostic.kind.value, diagnostic.plugin, detail


def print_validation(result: ValidationResult) -> None:
    """Print a validation report."""
    if result.errors or result.warnings:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Level")
        table.add_column("Type")
        table.add_column("Plugin", style="cyan")
        table.add_column("Message")

        for diagnostic in result.errors:
            table.add_row("[red]error[/red]", *_diagnostic_row(diagnostic))
        for diagnostic in result.warnings:
            table.add_row("[yellow]warning[/yellow]", *_diagnostic_row(diagnostic))

        console.print(table)

    if result.valid:
        print_success(f"Valid ({len(result.warnings)} warnings)")
    else:
        print_error(f"Invalid: {len(result.errors)} errors, {len(result.warnings)} warnings")
