"""Initialize project command."""

import click

from ..db import init_db
from .base import async_command, echo_info, echo_success, get_cli_db_path


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the fittrack document store.

    Creates the data directory and the SQLite database schema. Safe to run
    more than once.
    """
    db_path = get_cli_db_path(ctx)
    echo_info(f"Initializing fittrack in {db_path.parent}")

    await init_db(db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("Next steps:")
    click.echo("  fittrack programs import program.json --user <user-id>")
    click.echo("  fittrack programs list --user <user-id>")
