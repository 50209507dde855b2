"""
Main CLI entry point.
"""

import typer

from tickcron import __version__
from tickcron.cli import check, run, schedule


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"tickcron version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="tickcron",
    help="tickcron - cron schedule parsing and a minute-aligned job runner",
    add_completion=True,
)

# Register commands
app.command(name="check")(check.check)
app.command(name="next")(schedule.next_fires)
app.command(name="prev")(schedule.previous_fires)
app.command(name="run")(run.run)


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    tickcron - cron schedule parsing and a minute-aligned job runner.

    Run 'tickcron <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
