# dexmetrics/cli/commands/db.py

import click

from ...database.connection import DatabaseManager


@click.group()
def db():
    """Database administration"""
    pass


@db.command('init')
@click.pass_context
def init(ctx):
    """Create the stored_transactions and pool_snapshots tables if missing"""
    cli_context = ctx.obj['cli_context']

    try:
        db_manager = cli_context.get(DatabaseManager)
        db_manager.create_tables()
        click.echo("✅ Tables ready")
    except Exception as e:
        raise click.ClickException(f"Database init failed: {e}")


@db.command('health')
@click.pass_context
def health(ctx):
    """Check database connectivity"""
    cli_context = ctx.obj['cli_context']

    db_manager = cli_context.get(DatabaseManager)
    if not db_manager.health_check():
        raise click.ClickException("Database health check failed")
    click.echo("✅ Database reachable")
