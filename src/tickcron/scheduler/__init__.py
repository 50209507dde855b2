"""
Minute-aligned scheduler for cron tasks.
"""

from tickcron.scheduler.runner import Scheduler
from tickcron.scheduler.task import Task

__all__ = ["Scheduler", "Task"]
