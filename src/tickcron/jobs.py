"""
Job decorator and job discovery.

Jobs are plain functions (or coroutine functions) marked with ``@job`` in
Python files under a project's jobs directory::

    from tickcron import job

    @job("*/5 * * * *")
    def heartbeat():
        ...

``discover_jobs`` imports those files and ``build_tasks`` turns the result
into scheduler Tasks, applying per-job overrides from config.yaml.
"""

from __future__ import annotations

import importlib.util
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from tickcron.config.loader import Config
from tickcron.cron.parser import parse
from tickcron.exceptions import JobDefinitionError
from tickcron.scheduler.task import Task
from tickcron.utils.logging import get_logger

logger = get_logger("tickcron.jobs")

F = TypeVar("F", bound=Callable[..., Any])

JOB_ATTR = "_tickcron_job"


def job(schedule: str, *, name: str | None = None, description: str | None = None) -> Callable[[F], F]:
    """
    Mark a function as a scheduled job.

    The schedule is parsed immediately so a typo fails at import time rather
    than at the first tick.

    Args:
        schedule: 5-field cron expression
        name: Job name (default: the function name)
        description: Optional human-readable description

    Raises:
        InvalidScheduleError: If ``schedule`` does not parse
    """
    parse(schedule)

    def decorator(func: F) -> F:
        if not callable(func):
            raise JobDefinitionError(f"@job must decorate a callable, got {type(func).__name__}")
        setattr(
            func,
            JOB_ATTR,
            {
                "name": name or func.__name__,
                "schedule": schedule,
                "description": description or (func.__doc__ or "").strip() or None,
            },
        )
        return func

    return decorator


def discover_jobs(jobs_dir: Path) -> dict[str, dict[str, Any]]:
    """
    Discover jobs from Python files in ``jobs_dir``.

    Files named ``test_*.py`` are skipped. A file that fails to import is
    logged and skipped; the other files are still loaded.

    Args:
        jobs_dir: Directory containing job files

    Returns:
        Dictionary mapping job names to job info (name, schedule, description,
        file, function)

    Raises:
        JobDefinitionError: If two jobs share a name
    """
    jobs: dict[str, dict[str, Any]] = {}
    if not jobs_dir.is_dir():
        logger.warning(f"Jobs directory not found: {jobs_dir}")
        return jobs

    for py_file in sorted(jobs_dir.glob("**/*.py")):
        if py_file.name.startswith("test_"):
            continue

        try:
            spec = importlib.util.spec_from_file_location(f"tickcron_jobs.{py_file.stem}", py_file)
            if spec is None or spec.loader is None:
                continue
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        except Exception as e:
            logger.error(f"Error loading {py_file}: {e}", exc_info=True)
            continue

        for attr in dir(module):
            obj = getattr(module, attr)
            if not (callable(obj) and hasattr(obj, JOB_ATTR)):
                continue
            job_info = dict(getattr(obj, JOB_ATTR))
            if job_info["name"] in jobs and jobs[job_info["name"]]["function"] is not obj:
                raise JobDefinitionError(
                    f"Duplicate job name '{job_info['name']}' in {py_file} and {jobs[job_info['name']]['file']}",
                    details={"job": job_info["name"]},
                )
            job_info["file"] = str(py_file)
            job_info["function"] = obj
            jobs[job_info["name"]] = job_info

    logger.debug(f"Discovered {len(jobs)} job(s) in {jobs_dir}")
    return jobs


def build_tasks(jobs: dict[str, dict[str, Any]], config: Config | None = None) -> list[Task]:
    """
    Turn discovered jobs into scheduler Tasks.

    ``jobs.<name>.schedule`` in config overrides the decorator's schedule and
    ``jobs.<name>.enabled: false`` drops the job. ``scheduler.timezone: local``
    switches every schedule to local time.

    Raises:
        ConfigurationError: If ``config`` is malformed
        InvalidScheduleError: If a schedule override does not parse
    """
    if config is None:
        config = Config({})
    config.validate()
    use_local = config.timezone == "local"

    tasks: list[Task] = []
    for name, job_info in jobs.items():
        overrides = config.jobs.get(name) or {}
        if not overrides.get("enabled", True):
            logger.info(f"Job '{name}' disabled by config")
            continue

        schedule = str(overrides.get("schedule") or job_info["schedule"])
        cron = parse(schedule)
        if use_local:
            cron.use_local()
        tasks.append(Task(name=name, cron=cron, fn=job_info["function"]))
    return tasks
