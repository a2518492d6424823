# dexmetrics/cli/commands/tokens.py

import click

from ..context import to_json
from ...services.price_history_service import PriceHistoryService
from ...services.token_service import TokenService


@click.group()
def tokens():
    """Token prices and listings"""
    pass


@tokens.command('overview')
@click.option('--q', 'query', help='Search symbol, name or category')
@click.option('--limit', type=int, help='Page size')
@click.option('--offset', type=int, default=0, help='Page offset')
@click.option('--json', 'as_json', is_flag=True, help='Print raw JSON')
@click.pass_context
def overview(ctx, query, limit, offset, as_json):
    """Tokens sorted by TVL"""
    cli_context = ctx.obj['cli_context']

    try:
        result = cli_context.get(TokenService).tokens_overview(q=query, limit=limit, offset=offset, force=True)
    except Exception as e:
        raise click.ClickException(f"Tokens overview failed: {e}")

    if as_json:
        click.echo(to_json(result))
        return

    click.echo(f"🪙 {result.total} tokens")
    click.echo("=" * 60)
    for token in result.tokens:
        label = token.symbol or token.token_category[:12]
        click.echo(f"   {label:<12} price={token.price_bch}  tvl={token.tvl_bch}  "
                   f"1d={token.change_1d_percent}  7d={token.change_7d_percent}")


@tokens.command('price')
@click.argument('token_category')
@click.pass_context
def price(ctx, token_category):
    """Liquidity-weighted market price of a token"""
    cli_context = ctx.obj['cli_context']

    try:
        result = cli_context.get(TokenService).market_price(token_category, force=True)
    except Exception as e:
        raise click.ClickException(f"Market price failed: {e}")

    if not result.has_market_pools:
        click.echo("⚠️  No market pools for this token")
        return
    click.echo(f"💱 {result.market_price} BCH across {result.pool_count} pools "
               f"({result.total_liquidity} BCH liquidity)")


@tokens.command('history')
@click.argument('token_category')
@click.option('--range', 'range_name', default='30d', help='1h, 24h, 7d, 30d or 90d')
@click.option('--live', is_flag=True, help='Append the current spot price')
@click.pass_context
def history(ctx, token_category, range_name, live):
    """Trade price series of a token as JSON"""
    cli_context = ctx.obj['cli_context']

    try:
        result = cli_context.get(PriceHistoryService).price_history(token_category, range_name, live=live, force=True)
    except Exception as e:
        raise click.ClickException(f"Price history failed: {e}")

    click.echo(to_json(result))
