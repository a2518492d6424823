# dexmetrics/cli/commands/stats.py

import click

from ..context import to_json
from ...services.volume_service import VolumeService


@click.group()
def stats():
    """Platform volume and TVL"""
    pass


@stats.command('volume')
@click.option('--json', 'as_json', is_flag=True, help='Print raw JSON')
@click.pass_context
def volume(ctx, as_json):
    """Swap volume over the last 24h and 30d, with the windows before them"""
    cli_context = ctx.obj['cli_context']

    try:
        result = cli_context.get(VolumeService).volume_stats(force=True)
    except Exception as e:
        raise click.ClickException(f"Volume statistics failed: {e}")

    if as_json:
        click.echo(to_json(result))
        return

    click.echo("📊 Volume (BCH)")
    click.echo("=" * 40)
    click.echo(f"   Last 24h:      {result.volume_24h_bch}")
    click.echo(f"   Previous 24h:  {result.prev_24h_bch}")
    click.echo(f"   Last 30d:      {result.volume_30d_bch}")
    click.echo(f"   Previous 30d:  {result.prev_30d_bch}")
    click.echo(f"   TVL (BCH side): {result.tvl_bch}")


@stats.command('tvl-history')
@click.option('--range', 'range_name', default='30d', type=click.Choice(['7d', '30d', '90d']))
@click.option('--json', 'as_json', is_flag=True, help='Print raw JSON')
@click.pass_context
def tvl_history(ctx, range_name, as_json):
    """Daily TVL and volume points

    Examples:
        stats tvl-history --range 7d
    """
    cli_context = ctx.obj['cli_context']

    try:
        history = cli_context.get(VolumeService).tvl_volume_history(range_name, force=True)
    except Exception as e:
        raise click.ClickException(f"TVL history failed: {e}")

    if as_json:
        click.echo(to_json(history))
        return

    click.echo(f"📈 TVL / volume history ({history.range})")
    click.echo("=" * 50)
    for point in history.points:
        click.echo(f"   {point.timestamp}  tvl={point.tvl_bch}  volume={point.volume_bch}")
