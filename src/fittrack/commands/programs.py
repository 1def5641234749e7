"""Program management commands."""

import json

import click

from ..db import (
    DocumentStore,
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
)
from ..errors import FitTrackError
from ..models import EntityRef
from ..services import import_program_tree
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_cli_db_path,
)


@click.group()
@click.pass_context
def programs(ctx):
    """Manage programs.

    Commands for listing, viewing, importing and archiving programs.
    """
    ensure_initialized(ctx)


@programs.command(name="list")
@click.option("--user", "-u", "user_id", required=True, help="Owner user id")
@click.option("--archived", "-a", is_flag=True, help="Include archived programs")
@click.pass_context
@async_command
async def list_programs(ctx, user_id: str, archived: bool):
    """List a user's programs."""
    repo = ProgramRepository(get_cli_db_path(ctx))
    all_programs = await repo.list_for_user(user_id, include_archived=archived)

    if not all_programs:
        echo_info("No programs found. Import one with 'fittrack programs import'")
        return

    headers = ["ID", "Name", "Archived", "Created"]
    rows = []
    for prog in all_programs:
        rows.append([
            prog.id,
            prog.name[:30] + "..." if len(prog.name) > 30 else prog.name,
            "yes" if prog.is_archived else "",
            prog.created_at.strftime("%Y-%m-%d"),
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_programs)} program(s)")


@programs.command()
@click.argument("program_id")
@click.option("--user", "-u", "user_id", required=True, help="Owner user id")
@click.pass_context
@async_command
async def show(ctx, program_id: str, user_id: str):
    """Show a program with its weeks, workouts, exercises and sets."""
    store = DocumentStore(get_cli_db_path(ctx))
    program = await ProgramRepository(store=store).get(
        EntityRef(user_id=user_id, program_id=program_id)
    )
    if not program:
        echo_error(f"Program {program_id} not found")
        ctx.exit(1)

    weeks = WeekRepository(store=store)
    workouts = WorkoutRepository(store=store)
    exercises = ExerciseRepository(store=store)
    sets = SetRepository(store=store)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Program: {program.name} (ID: {program.id})")
    click.echo("=" * 60)
    if program.description:
        click.echo(f"Description: {program.description}")
    click.echo()

    for week in await weeks.list_children(program.ref):
        click.echo(f"{week.name} [{week.id}]")
        for workout in await workouts.list_children(week.ref):
            day = f" ({workout.day_of_week_name})" if workout.day_of_week else ""
            click.echo(f"  {workout.name}{day} [{workout.id}]")
            for exercise in await exercises.list_children(workout.ref):
                click.echo(f"    - {exercise.name} ({exercise.exercise_type.display_name})")
                for exercise_set in await sets.list_children(exercise.ref):
                    mark = "x" if exercise_set.checked else " "
                    click.echo(
                        f"        [{mark}] Set {exercise_set.set_number}: {exercise_set.display_string}"
                    )
        click.echo()


@programs.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--user", "-u", "user_id", required=True, help="Owner user id")
@click.pass_context
@async_command
async def import_program(ctx, path: str, user_id: str):
    """Import a program tree from a JSON file.

    The file holds a program with nested "weeks", "workouts", "exercises"
    and "sets" lists, using the document field names.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            echo_error(f"Invalid JSON in {path}: {e}")
            ctx.exit(1)

    store = DocumentStore(get_cli_db_path(ctx))
    try:
        program_id, written = await import_program_tree(store, user_id, data)
    except FitTrackError as e:
        echo_error(f"{e.code}: {e.message}")
        ctx.exit(1)

    echo_success(f"Imported program {program_id} ({written} documents)")


@programs.command()
@click.argument("program_id")
@click.option("--user", "-u", "user_id", required=True, help="Owner user id")
@click.pass_context
@async_command
async def archive(ctx, program_id: str, user_id: str):
    """Archive a program (hidden from the default list)."""
    repo = ProgramRepository(get_cli_db_path(ctx))
    try:
        await repo.archive(EntityRef(user_id=user_id, program_id=program_id))
    except FitTrackError as e:
        echo_error(f"{e.code}: {e.message}")
        ctx.exit(1)
    echo_success(f"Program {program_id} archived")
