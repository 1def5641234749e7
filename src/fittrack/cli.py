"""CLI entry point for fittrack."""

import logging

import click

from . import __version__
from .commands import delete, init, programs, serve, weeks


@click.group()
@click.version_option(version=__version__, prog_name="fittrack")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar="FITTRACK_DATA_DIR",
    help="Directory holding the database (env: FITTRACK_DATA_DIR)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, data_dir: str | None, verbose: bool):
    """fittrack: training programs with cascading delete and duplicate.

    Example usage:

        # Initialize the store
        fittrack init

        # Import a program and inspect it
        fittrack programs import program.json --user alice
        fittrack programs show <program-id> --user alice

        # Duplicate a week, delete a workout with everything in it
        fittrack weeks duplicate <program-id> <week-id> --user alice
        fittrack delete <program-id> --week <week-id> --workout <workout-id> --user alice
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register commands
main.add_command(init)
main.add_command(programs)
main.add_command(weeks)
main.add_command(delete)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
