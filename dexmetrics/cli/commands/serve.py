# dexmetrics/cli/commands/serve.py

import click
import uvicorn


@click.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', default=8000, type=int, help='Bind port')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host, port, reload):
    """Run the HTTP API"""
    click.echo(f"🚀 Serving API on http://{host}:{port}")
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)
