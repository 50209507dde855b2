"""
tickcron check - Validate a cron schedule.

Prints the expanded values of every field and the next activation, or every
field error when the schedule is invalid.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tickcron.cron.parser import parse
from tickcron.exceptions import InvalidScheduleError

console = Console()


def _format_values(values: list[int]) -> str:
    """Collapse runs of consecutive values: [0, 1, 2, 5] -> "0-2,5"."""
    parts: list[str] = []
    start = prev = None
    for v in values:
        if start is None:
            start = prev = v
        elif v == prev + 1:
            prev = v
        else:
            parts.append(str(start) if start == prev else f"{start}-{prev}")
            start = prev = v
    if start is not None:
        parts.append(str(start) if start == prev else f"{start}-{prev}")
    return ",".join(parts)


def check(
    expression: str = typer.Argument(..., help='Cron schedule, e.g. "*/5 * * * *"'),
    local: bool = typer.Option(False, "--local", help="Evaluate in local time instead of UTC"),
) -> None:
    """
    Validate a cron schedule and show what it expands to.
    """
    try:
        cron = parse(expression)
    except InvalidScheduleError as e:
        console.print(f"[red]Invalid:[/red] {escape(e.message)}", highlight=False)
        for err in e.errors:
            console.print(f"  [red]-[/red] {escape(str(err))}", highlight=False)
        raise typer.Exit(1) from None

    if local:
        cron.use_local()

    table = Table(title=f"'{expression}'", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Values", style="green")
    for field, values in cron.fields.items():
        table.add_row(field.value, _format_values(values.values()))
    console.print(table)
    console.print(f"Next: {cron.next().isoformat()}", highlight=False)
