"""Week commands."""

import click

from ..db import DocumentStore, WeekRepository
from ..errors import CascadeCommitError, FitTrackError
from ..models import EntityRef
from ..services import CascadeOperator
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    get_cli_db_path,
)


@click.group()
@click.pass_context
def weeks(ctx):
    """List and duplicate weeks."""
    ensure_initialized(ctx)


@weeks.command(name="list")
@click.argument("program_id")
@click.option("--user", "-u", "user_id", required=True, help="Owner user id")
@click.pass_context
@async_command
async def list_weeks(ctx, program_id: str, user_id: str):
    """List the weeks of a program."""
    repo = WeekRepository(get_cli_db_path(ctx))
    all_weeks = await repo.list_children(EntityRef(user_id=user_id, program_id=program_id))

    if not all_weeks:
        echo_info("No weeks found")
        return

    rows = [[week.id, str(week.order), week.name] for week in all_weeks]
    click.echo()
    click.echo(format_table(["ID", "Order", "Name"], rows))


@weeks.command()
@click.argument("program_id")
@click.argument("week_id")
@click.option("--user", "-u", "user_id", required=True, help="Caller user id")
@click.pass_context
@async_command
async def duplicate(ctx, program_id: str, week_id: str, user_id: str):
    """Duplicate a week with all of its workouts, exercises and sets."""
    cascade = CascadeOperator(DocumentStore(get_cli_db_path(ctx)))
    try:
        mapping = await cascade.duplicate_week(user_id, program_id, week_id)
    except CascadeCommitError as e:
        echo_error(f"Duplication failed: {e.message}")
        echo_warning("Some writes may have been applied. Reload before retrying.")
        ctx.exit(1)
    except FitTrackError as e:
        echo_error(f"{e.code}: {e.message}")
        ctx.exit(1)

    echo_success(
        f"Created '{mapping.new_week_name}' ({mapping.new_week_id}), "
        f"{mapping.total_documents} documents"
    )
