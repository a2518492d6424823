# dexmetrics/cli/__main__.py

"""
DEX Metrics CLI

Usage: python -m dexmetrics.cli [command] [options]

Runs the same aggregators the HTTP API serves, against the configured
database, and prints the results.
"""

import atexit
import os

import click

from dexmetrics.cli.context import CLIContext

# Create global CLI context
cli_context = CLIContext()

@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """DEX Metrics CLI - derived market metrics from pools and the transaction log

    Command groups:
    - Database administration
    - Platform volume and TVL
    - Token prices and listings
    - Portfolio balance history
    - API server
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['cli_context'] = cli_context

    # Engine creation configures logging from the environment
    os.environ.setdefault("DEXMETRICS_LOG_STRUCTURED", "false")
    if verbose:
        os.environ["DEXMETRICS_LOG_LEVEL"] = "DEBUG"


# Import command groups
from dexmetrics.cli.commands.db import db
from dexmetrics.cli.commands.stats import stats
from dexmetrics.cli.commands.tokens import tokens
from dexmetrics.cli.commands.portfolio import portfolio
from dexmetrics.cli.commands.serve import serve

# Register command groups
cli.add_command(db)
cli.add_command(stats)
cli.add_command(tokens)
cli.add_command(portfolio)
cli.add_command(serve)

def cleanup():
    """Shut down database connections held by the CLI context"""
    cli_context.shutdown()


atexit.register(cleanup)


if __name__ == '__main__':
    cli()
