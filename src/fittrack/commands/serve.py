"""Web server command."""

import click

from .base import ensure_initialized, get_cli_db_path


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int):
    """Start the HTTP API.

    Examples:

        # Start on default port (8000)
        fittrack serve

        # Expose to network (all interfaces)
        fittrack serve --host 0.0.0.0 --port 3000
    """
    ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting fittrack API...", fg="green"))
    click.echo(f"  http://{host}:{port}")
    click.echo()

    app = create_app(get_cli_db_path(ctx))
    uvicorn.run(app, host=host, port=port)
