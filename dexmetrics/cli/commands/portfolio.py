# dexmetrics/cli/commands/portfolio.py

import click

from ..context import to_json
from ...services.balance_history_service import BalanceHistoryService


@click.group()
def portfolio():
    """Per-address portfolio views"""
    pass


@portfolio.command('balance-history')
@click.argument('address')
@click.pass_context
def balance_history(ctx, address):
    """Replay the address's swaps and print the balance curve as JSON"""
    cli_context = ctx.obj['cli_context']

    try:
        result = cli_context.get(BalanceHistoryService).balance_history(address, force=True)
    except Exception as e:
        raise click.ClickException(f"Balance history failed: {e}")

    click.echo(to_json(result))
