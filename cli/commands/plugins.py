"""Plugins CLI commands for docforge.

Inspect the plugin registry and compute activation orders.
"""

import typer

from cli.docforge.output import (
    console,
    print_error,
    print_info,
    print_json,
    print_order,
    print_plugin_detail,
    print_plugins,
    print_skipped,
    print_success,
    print_validation,
    print_warning,
)
from pipeline.config import Config
from plugins import PluginError, PluginResolver, PluginValidationError, plan_activation

plugins_app = typer.Typer(
    name="plugins",
    help="Inspect plugins and resolve their dependencies.",
    no_args_is_help=True,
)


def get_resolver(ctx: typer.Context) -> PluginResolver:
    """Create a resolver from configuration and load its registry."""
    config: Config = ctx.obj["config"]
    resolver = config.plugins.create_resolver()
    resolver.load_registry()
    return resolver


@plugins_app.command("list")
def list_plugins(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List all plugins in the registry.

    Examples:
        docforge plugins list
        docforge plugins list --json
    """
    resolver = get_resolver(ctx)
    plugins = resolver.list_plugins()

    if as_json:
        print_json([p.model_dump(mode="json") for p in plugins])
        return

    print_plugins(plugins)
    print_skipped(resolver.skipped)


@plugins_app.command("show")
def show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Plugin name"),
) -> None:
    """Show details and the dependency tree of a plugin.

    Example:
        docforge plugins show cookie-consent
    """
    resolver = get_resolver(ctx)

    if not resolver.has_plugin(name):
        print_error(f"Plugin '{name}' not found")
        raise typer.Exit(1)

    print_plugin_detail(resolver.get_plugin(name), resolver.registry)


@plugins_app.command("resolve")
def resolve(
    ctx: typer.Context,
    names: list[str] = typer.Argument(..., help="Plugins (or capabilities) to activate"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Print the activation order for a set of plugins.

    Examples:
        docforge plugins resolve cookie-consent
        docforge plugins resolve components search-local --json
    """
    resolver = get_resolver(ctx)

    try:
        order = resolver.resolve(names)
    except PluginError as e:
        print_error(e.message)
        raise typer.Exit(1)

    if as_json:
        print_json(order)
        return

    print_order(order)


@plugins_app.command("validate")
def validate(
    ctx: typer.Context,
    names: list[str] = typer.Argument(..., help="Plugins (or capabilities) to check"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Report every dependency problem for a set of plugins.

    Exits with status 1 if any error is found; warnings alone pass.

    Example:
        docforge plugins validate cookie-consent blog
    """
    resolver = get_resolver(ctx)
    result = resolver.validate(names)

    if as_json:
        print_json(result.to_dict())
    else:
        print_validation(result)

    if not result.valid:
        raise typer.Exit(1)


@plugins_app.command("providers")
def providers(
    ctx: typer.Context,
    capability: str = typer.Argument(..., help="Capability name"),
) -> None:
    """Show which plugins provide a capability.

    Example:
        docforge plugins providers cookie-detection
    """
    resolver = get_resolver(ctx)
    found = resolver.registry.providers_of(capability)

    if not found:
        print_error(f"No plugin provides capability '{capability}'")
        raise typer.Exit(1)

    for name in found:
        console.print(f"  - [cyan]{name}[/cyan]")

    if len(found) > 1:
        print_warning(f"Multiple providers; '{found[0]}' is used")


@plugins_app.command("plan")
def plan(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Validate and resolve the plugins enabled in config.toml.

    Example:
        docforge plugins plan
    """
    config: Config = ctx.obj["config"]
    entries = config.plugins.activation_entries()
    resolver = get_resolver(ctx)

    try:
        activation = plan_activation(resolver, entries)
    except PluginValidationError as e:
        print_validation(e.result)
        raise typer.Exit(1)
    except PluginError as e:
        print_error(e.message)
        raise typer.Exit(1)

    if as_json:
        print_json({"order": activation.order, "configs": activation.configs})
        return

    if not activation.order:
        print_info("No plugins enabled")
        return

    for warning in activation.warnings:
        print_warning(f"{warning.plugin}: {warning.message}")

    print_order(activation.order)
    print_success(f"{len(activation.order)} plugins will be activated")
