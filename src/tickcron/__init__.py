"""
tickcron - parse 5-field cron schedules and run jobs on them.
"""

__version__ = "0.1.0"

# Schedules
from tickcron.cron import Cron, FieldValueSet, frozen_clock, is_valid, parse, reset_clock, set_clock

# Exceptions
from tickcron.exceptions import (
    ConfigurationError,
    EmptyScheduleError,
    FieldError,
    InvalidScheduleError,
    InvertedRangeError,
    JobDefinitionError,
    MalformedScheduleError,
    OutOfRangeError,
    ScheduleError,
    TaskExecutionError,
    TickcronError,
    UnsatisfiableFieldError,
    UnsatisfiableScheduleError,
)

# Jobs and scheduling
from tickcron.jobs import build_tasks, discover_jobs, job
from tickcron.scheduler import Scheduler, Task

# Logging utilities
from tickcron.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    # Schedules
    "parse",
    "is_valid",
    "Cron",
    "FieldValueSet",
    # Clock
    "set_clock",
    "reset_clock",
    "frozen_clock",
    # Jobs and scheduling
    "job",
    "discover_jobs",
    "build_tasks",
    "Scheduler",
    "Task",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Exceptions
    "TickcronError",
    "ConfigurationError",
    "ScheduleError",
    "InvalidScheduleError",
    "EmptyScheduleError",
    "MalformedScheduleError",
    "UnsatisfiableScheduleError",
    "FieldError",
    "OutOfRangeError",
    "InvertedRangeError",
    "UnsatisfiableFieldError",
    "JobDefinitionError",
    "TaskExecutionError",
]
