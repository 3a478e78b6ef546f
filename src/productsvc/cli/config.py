"""
productsvc config - Environment configuration.

Display the configuration files of an application directory.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax

from productsvc.config.environment import EnvironmentResolver
from productsvc.config.loader import BASE_CONFIG_FILE, config_file_for
from productsvc.config.service import CONNECTION_STRINGS_SECTION, ConfigurationService

app = typer.Typer(name="config", help="Show application configuration", invoke_without_command=True)

console = Console()


@app.callback()
def config(
    ctx: typer.Context,
    env: str = typer.Option(None, help="Specific environment to show"),
    app_dir: Path = typer.Option(Path.cwd(), "--app-dir", "-d", help="Application directory"),
):
    """
    List available environments, or show one environment's file.
    """
    if ctx.invoked_subcommand is not None:
        return

    if env:
        config_file = config_file_for(app_dir, env)
        if not config_file.exists():
            console.print(f"[red]Configuration not found for environment: {env}[/red]")
            raise typer.Exit(1)
        console.print(f"\n[bold]Configuration: {config_file.name}[/bold]\n")
        console.print(Syntax(config_file.read_text(), "yaml", theme="monokai", line_numbers=True))
        return

    if not config_file_for(app_dir).exists():
        console.print(f"[yellow]No {BASE_CONFIG_FILE} found in {app_dir}[/yellow]")
        raise typer.Exit(1)

    active = EnvironmentResolver().resolve()
    console.print(f"\n[bold]Active environment:[/bold] {active}\n")
    console.print("[bold]Available Environments:[/bold]\n")

    service = ConfigurationService()
    for config_file in sorted(app_dir.glob("config.*.yaml")):
        env_name = config_file.name[len("config.") : -len(".yaml")]
        try:
            cfg = service.build(app_dir, env_name)
            contexts = ", ".join(sorted(cfg.get(CONNECTION_STRINGS_SECTION, {}))) or "-"
            console.print(f"  [cyan]{env_name}[/cyan] ({config_file.name})")
            console.print(f"    Connection strings: {contexts}")
        except Exception as e:
            console.print(f"  [cyan]{env_name}[/cyan] ({config_file.name}) [red]{e}[/red]")

    console.print("\n[dim]Use 'productsvc config --env <name>' to view details[/dim]")
