"""
tickcron exception hierarchy.

All domain-specific exceptions inherit from TickcronError, so callers can
catch any library error with a single base class while still handling
individual failures where it matters.

Hierarchy::

    TickcronError
    ├── ConfigurationError          - config loading, parsing, validation
    ├── ScheduleError               - cron schedule text problems (also ValueError)
    │   ├── InvalidScheduleError    - what parse() raises; wraps field errors
    │   │   ├── EmptyScheduleError
    │   │   ├── MalformedScheduleError
    │   │   └── UnsatisfiableScheduleError
    │   └── FieldError              - a single field failed to parse
    │       ├── OutOfRangeError
    │       ├── InvertedRangeError
    │       └── UnsatisfiableFieldError
    ├── JobDefinitionError          - @job misuse, duplicate job names
    └── TaskExecutionError          - a scheduled callback raised
"""

from __future__ import annotations

from collections.abc import Iterable


class TickcronError(Exception):
    """Base exception for all tickcron errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(TickcronError):
    """Raised when configuration loading, parsing, or validation fails."""


# --- Schedules ---------------------------------------------------------------


class ScheduleError(TickcronError, ValueError):
    """Base class for problems with cron schedule text."""


class FieldError(ScheduleError):
    """Raised when a single cron field cannot be parsed."""

    def __init__(self, field: str, token: str, message: str, *, details: dict | None = None) -> None:
        merged = {"field": field, "token": token}
        merged.update(details or {})
        super().__init__(f"{field}: {message}", details=merged)
        self.field = field
        self.token = token


class OutOfRangeError(FieldError):
    """Raised when a literal is outside the field bounds or is not a non-negative integer."""

    def __init__(
        self,
        field: str,
        token: str,
        value: str,
        min_value: int,
        max_value: int,
        *,
        reason: str | None = None,
    ) -> None:
        message = reason or f"value {value!r} in {token!r} is outside [{min_value}, {max_value}]"
        super().__init__(
            field,
            token,
            message,
            details={"value": value, "min": min_value, "max": max_value},
        )
        self.value = value
        self.min_value = min_value
        self.max_value = max_value


class InvertedRangeError(FieldError):
    """Raised when a range's lower bound exceeds its upper bound (e.g. ``12-6``)."""

    def __init__(self, field: str, token: str, start: int, end: int) -> None:
        super().__init__(
            field,
            token,
            f"range {start}-{end} in {token!r} has start > end",
            details={"start": start, "end": end},
        )
        self.start = start
        self.end = end


class UnsatisfiableFieldError(FieldError):
    """Raised when a field expands to no values at all (e.g. ``3-3/2``)."""

    def __init__(self, field: str, token: str) -> None:
        super().__init__(field, token, f"{token!r} does not select any value")


class InvalidScheduleError(ScheduleError):
    """Raised by ``parse`` when a schedule is rejected.

    ``errors`` holds every field-level failure, in field order, so a caller
    sees all malformed fields at once. It is empty for whole-schedule problems
    (empty input, wrong field count).
    """

    def __init__(self, schedule: str, message: str | None = None, errors: Iterable[FieldError] = ()) -> None:
        self.schedule = schedule
        self.errors: tuple[FieldError, ...] = tuple(errors)
        if message is None:
            message = f"invalid cron schedule {schedule!r}"
            if self.errors:
                message += ": " + "; ".join(str(e) for e in self.errors)
        super().__init__(message, details={"schedule": schedule, "errors": [str(e) for e in self.errors]})
        if self.errors:
            self.__cause__ = self.errors[0]


class EmptyScheduleError(InvalidScheduleError):
    """Raised when the schedule string is empty."""

    def __init__(self) -> None:
        super().__init__("", "cron schedule is empty")


class MalformedScheduleError(InvalidScheduleError):
    """Raised when a schedule does not split into exactly five space-separated fields."""

    def __init__(self, schedule: str, field_count: int) -> None:
        super().__init__(
            schedule,
            f"cron schedule {schedule!r} must have 5 space-separated fields, got {field_count}",
        )
        self.field_count = field_count


class UnsatisfiableScheduleError(InvalidScheduleError):
    """Raised when the day-of-month and month fields admit no calendar date (e.g. ``31 2``)."""

    def __init__(self, schedule: str) -> None:
        super().__init__(schedule, f"cron schedule {schedule!r} never matches a calendar date")


# --- Jobs --------------------------------------------------------------------


class JobDefinitionError(TickcronError):
    """Raised when a job is declared incorrectly."""


class TaskExecutionError(TickcronError):
    """Raised when a scheduled callback fails and the scheduler stops because of it."""

    def __init__(self, task_name: str, *, cause: BaseException | None = None) -> None:
        message = f"Task '{task_name}' failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message, details={"task": task_name})
        self.task_name = task_name
        if cause is not None:
            self.__cause__ = cause
