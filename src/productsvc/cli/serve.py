"""
productsvc serve - HTTP service.

Serves GET /api/products/{id} and GET /health.
"""

from pathlib import Path

import typer

from productsvc.service.server import run_service

app = typer.Typer(name="serve", help="Run the products HTTP service", invoke_without_command=True)


@app.callback()
def serve(
    ctx: typer.Context,
    app_dir: Path = typer.Option(Path.cwd(), "--app-dir", "-d", help="Application directory holding config.yaml"),
    host: str = typer.Option(None, help="Host to bind to (default: service.host or 127.0.0.1)"),
    port: int = typer.Option(None, help="Port to bind to (default: service.port or 8080)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Run the products HTTP service.

    The environment comes from PRODUCTSVC_ENVIRONMENT (default: Production).
    Configuration errors stop the service before it binds.
    """
    if ctx.invoked_subcommand is None:
        try:
            run_service(app_dir=app_dir, host=host, port=port, verbose=verbose)
        except Exception as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
