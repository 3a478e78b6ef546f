"""
CLI command for migrations.

Runs out-of-band: the service does not need to be running. The connection is
resolved by the mode chosen with ``--mode``; any extra arguments (for example
``--environment Development``) are handed to the resolver.
"""

from pathlib import Path

import typer

from productsvc.config.service import ConfigurationService
from productsvc.connections.database import ProductsDatabase
from productsvc.connections.resolver import DEFAULT_CONTEXT, ConnectionResolver, ResolutionMode
from productsvc.migrations.runner import list_pending_migrations, run_migrations
from productsvc.migrations.utils import get_migrations
from productsvc.utils.logging import get_logger

logger = get_logger("productsvc.migrations.cli")

CONTEXT_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def migrate(
    ctx: typer.Context,
    mode: ResolutionMode = typer.Option(
        ResolutionMode.DESIGN_ENVIRONMENT, "--mode", help="How the connection string is resolved"
    ),
    app_dir: Path = typer.Option(
        None, "--app-dir", "-d", help="Application directory holding config.yaml (default: ../app)"
    ),
    context: str = typer.Option(DEFAULT_CONTEXT, "--context", "-c", help="Logical connection name"),
    migration: str = typer.Option(None, "--migration", "-m", help="Specific migration id to run"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be executed without running"),
    list_only: bool = typer.Option(False, "--list", "-l", help="List migrations and their status"),
    allow_developer_fallback: bool = typer.Option(
        False, "--allow-developer-fallback", help="Permit the hardcoded developer connection"
    ),
):
    """
    Apply database migrations.

    Examples:
        # Environment from PRODUCTSVC_ENVIRONMENT
        productsvc migrate --app-dir ../app

        # Environment from the command line
        productsvc migrate --mode design-argument --environment Development

        # List migrations
        productsvc migrate --list
    """
    try:
        resolver = ConnectionResolver(
            ConfigurationService(),
            mode=mode,
            app_dir=app_dir,
            design_app_dir=app_dir,
            args=ctx.args,
            allow_developer_fallback=allow_developer_fallback,
        )
        descriptor = resolver.resolve(context)

        with ProductsDatabase(descriptor) as database:
            if list_only:
                pending = set(list_pending_migrations(database))
                migrations = get_migrations(database.migrations_owner)
                if not migrations:
                    typer.echo("No migrations found")
                    return
                typer.echo(f"Migrations for {descriptor.migrations_owner} ({len(migrations)} total):")
                for m in migrations:
                    status = "pending" if m.migration_id in pending else "applied"
                    typer.echo(f"  {m.migration_id} ({status})")
                return

            results = run_migrations(database, migration_id=migration, dry_run=dry_run)

        if not results:
            typer.echo("No migrations to run")
            return

        failures = [r for r in results if not r.success]
        if dry_run:
            typer.echo(f"[DRY RUN] Would execute {len(results)} migration(s):")
            for result in results:
                typer.echo(f"  {result.migration_id}")
        else:
            typer.echo(f"Executed {len(results)} migration(s)")
            for result in results:
                if result.success:
                    typer.echo(f"  ✓ {result.migration_id}")
                else:
                    typer.echo(f"  ✗ {result.migration_id}: {result.error_message}", err=True)

        if failures:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
