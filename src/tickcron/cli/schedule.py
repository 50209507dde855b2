"""
tickcron next / tickcron prev - List activation instants of a schedule.
"""

from datetime import datetime

import typer

from tickcron.cron.parser import parse
from tickcron.exceptions import InvalidScheduleError


def _load(expression: str, local: bool):
    try:
        cron = parse(expression)
    except InvalidScheduleError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1) from None
    if local:
        cron.use_local()
    return cron


def _reference(start: str | None) -> datetime | None:
    if start is None:
        return None
    try:
        return datetime.fromisoformat(start)
    except ValueError:
        typer.echo(f"Error: --from must be an ISO-8601 datetime, got {start!r}", err=True)
        raise typer.Exit(2) from None


def next_fires(
    expression: str = typer.Argument(..., help='Cron schedule, e.g. "0 6 * * 1-5"'),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Number of instants to list"),
    start: str | None = typer.Option(None, "--from", help="Reference instant (ISO-8601, default: now)"),
    local: bool = typer.Option(False, "--local", help="Evaluate in local time instead of UTC"),
) -> None:
    """
    List the next activation instants of a schedule.
    """
    cron = _load(expression, local)
    for instant in cron.next_n(count, after=_reference(start)):
        typer.echo(instant.isoformat())


def previous_fires(
    expression: str = typer.Argument(..., help='Cron schedule, e.g. "0 6 * * 1-5"'),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Number of instants to list"),
    start: str | None = typer.Option(None, "--from", help="Reference instant (ISO-8601, default: now)"),
    local: bool = typer.Option(False, "--local", help="Evaluate in local time instead of UTC"),
) -> None:
    """
    List the previous activation instants of a schedule, newest first.
    """
    cron = _load(expression, local)
    for instant in cron.previous_n(count, before=_reference(start)):
        typer.echo(instant.isoformat())
