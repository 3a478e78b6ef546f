"""
Main CLI entry point.
"""

import typer

from productsvc import __version__
from productsvc.cli import config, serve
from productsvc.migrations import cli as migrate_cli


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"productsvc version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="productsvc",
    help="productsvc - products HTTP API and schema tooling",
    add_completion=False,
)

# Register subcommands
app.add_typer(serve.app, name="serve")
app.add_typer(config.app, name="config")
app.command("migrate", context_settings=migrate_cli.CONTEXT_SETTINGS)(migrate_cli.migrate)


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    productsvc - products HTTP API and schema tooling.

    Run 'productsvc <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
