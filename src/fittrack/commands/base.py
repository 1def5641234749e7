"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..db import get_db_path


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_cli_db_path(ctx: click.Context) -> Path:
    """Database path for the data directory chosen on the command line."""
    obj = ctx.find_object(dict) or {}
    return get_db_path(obj.get("data_dir"))


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_cli_db_path(ctx)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'fittrack init' first."
        )
        ctx.exit(1)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)
