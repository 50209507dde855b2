"""
tickcron run - Run a project's jobs on their schedules.

Loads config.yaml, discovers @job functions in the jobs directory and ticks
until SIGINT/SIGTERM.
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from tickcron.exceptions import ConfigurationError, InvalidScheduleError, JobDefinitionError, TaskExecutionError

console = Console()


def run(
    env: str | None = typer.Option(None, help="Environment (dev, staging, prod)"),
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output"),
) -> None:
    """
    Run scheduled jobs until interrupted.
    """
    from tickcron.config.loader import load_config
    from tickcron.jobs import build_tasks, discover_jobs
    from tickcron.scheduler import Scheduler
    from tickcron.utils.logging import setup_logging_from_config

    try:
        config = load_config(project_dir, env=env)
        config.validate()
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1) from None

    logger = setup_logging_from_config(config.data, project_dir=project_dir)
    if verbose:
        logger.setLevel("DEBUG")
        for handler in logger.handlers:
            handler.setLevel("DEBUG")

    try:
        tasks = build_tasks(discover_jobs(project_dir / config.jobs_dir), config)
    except (InvalidScheduleError, JobDefinitionError) as e:
        console.print(f"[red]Job error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1) from None
    if not tasks:
        console.print(f"[yellow]No jobs found in {project_dir / config.jobs_dir}[/yellow]", highlight=False)
        raise typer.Exit(1)

    scheduler = Scheduler(stop_on_error=config.stop_on_error).add_tasks(*tasks)
    for status in scheduler.get_status()["tasks"]:
        logger.info(f"{status['task']}: '{status['schedule']}' ({status['timezone']}), next at {status['next_fire_at']}")

    try:
        asyncio.run(scheduler.run())
    except TaskExecutionError as e:
        console.print(f"[red]{escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1) from None
