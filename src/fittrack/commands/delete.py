"""Cascade delete command."""

import click

from ..db import DocumentStore
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
    get_cli_db_path,
)


@click.command()
@click.argument("program_id")
@click.option("--week", "week_id", help="Week id (delete the week)")
@click.option("--workout", "workout_id", help="Workout id (requires --week)")
@click.option("--exercise", "exercise_id", help="Exercise id (requires --workout)")
@click.option("--set", "set_id", help="Set id (requires --exercise)")
@click.option("--user", "-u", "user_id", required=True, help="Caller user id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(
    ctx,
    program_id: str,
    week_id: str | None,
    workout_id: str | None,
    exercise_id: str | None,
    set_id: str | None,
    user_id: str,
    force: bool,
):
    """Delete an entity together with everything below it.

    Without options the whole program is deleted; --week, --workout,
    --exercise and --set narrow the target.
    """
    ensure_initialized(ctx)
    cascade = CascadeOperator(DocumentStore(get_cli_db_path(ctx)))

    try:
        ref = EntityRef(
            user_id=user_id,
            program_id=program_id,
            week_id=week_id,
            workout_id=workout_id,
            exercise_id=exercise_id,
            set_id=set_id,
        )
        counts = await cascade.get_cascade_delete_counts(user_id, ref)
    except FitTrackError as e:
        echo_error(f"{e.code}: {e.message}")
        ctx.exit(1)

    if not force:
        click.echo(f"Deleting {ref.level.value} {ref.entity_id}")
        if counts.has_items:
            click.echo(f"This will also delete {counts.get_summary()}.")
        if not click.confirm("Are you sure?"):
            echo_info("Cancelled")
            return

    try:
        deleted = await cascade.delete(user_id, ref)
    except CascadeCommitError as e:
        echo_error(f"Delete failed: {e.message}")
        echo_warning("Some documents may already be deleted. Reload before retrying.")
        ctx.exit(1)
    except FitTrackError as e:
        echo_error(f"{e.code}: {e.message}")
        ctx.exit(1)

    summary = f" and {deleted.get_summary()}" if deleted.has_items else ""
    echo_success(f"Deleted {ref.level.value} {ref.entity_id}{summary}")
