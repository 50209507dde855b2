"""
Cron schedule parser.

Parses standard 5-field crontab expressions into a ``Cron``.

Grammar::

    <schedule> ::= <minute> " " <hour> " " <day> " " <month> " " <weekday>
    <field>    ::= <item> ("," <item>)*
    <item>     ::= <base> ["/" <step>]
    <base>     ::= "*" | <int> | <int> "-" <int>

- Fields are separated by exactly one space; leading, trailing, or doubled
  spaces are rejected.
- Steps anchor to zero, not to the field minimum. Day-of-month and month are
  shifted to a 0-based index before the divisibility test, so ``*/5`` on
  day-of-month yields 1, 6, 11, 16, 21, 26, 31.
- ``a/n`` inserts ``a`` alone; the step is validated but has no effect.
- List items are unioned.
- Day-of-month and weekday are combined with AND when matching, never OR.

The five fields are parsed concurrently; every failing field is reported in a
single ``InvalidScheduleError``.
"""

from __future__ import annotations

import re
from concurrent.futures import Future, ThreadPoolExecutor

from tickcron.cron.field_set import FieldValueSet
from tickcron.cron.fields import FIELD_BOUNDS, FIELD_ORDER, CronField, FieldBounds
from tickcron.cron.schedule import Cron
from tickcron.exceptions import (
    EmptyScheduleError,
    FieldError,
    InvalidScheduleError,
    InvertedRangeError,
    MalformedScheduleError,
    OutOfRangeError,
    UnsatisfiableFieldError,
    UnsatisfiableScheduleError,
)
from tickcron.utils.logging import get_logger

logger = get_logger("tickcron.cron.parser")

_INT_RE = re.compile(r"[0-9]+")

# Longest month each month number can have (February in leap years).
_MONTH_LENGTHS = {1: 31, 2: 29, 3: 31, 4: 30, 5: 31, 6: 30, 7: 31, 8: 31, 9: 30, 10: 31, 11: 30, 12: 31}


def parse(schedule: str) -> Cron:
    """
    Parse a 5-field cron schedule.

    Args:
        schedule: Cron expression (e.g. "*/5 * * * *")

    Returns:
        Cron in UTC mode

    Raises:
        EmptyScheduleError: If ``schedule`` is empty
        MalformedScheduleError: If it does not have exactly five fields
        UnsatisfiableScheduleError: If no calendar date matches day and month
        InvalidScheduleError: If any field is invalid; ``errors`` lists them all
    """
    if schedule == "":
        raise EmptyScheduleError()

    tokens = schedule.split(" ")
    if len(tokens) != len(FIELD_ORDER):
        raise MalformedScheduleError(schedule, len(tokens))

    # One future per field: each carries its own result or exception.
    with ThreadPoolExecutor(max_workers=len(FIELD_ORDER), thread_name_prefix="tickcron-parse") as pool:
        futures: list[Future[FieldValueSet]] = [
            pool.submit(parse_field, token, field) for token, field in zip(tokens, FIELD_ORDER)
        ]

    sets: list[FieldValueSet] = []
    errors: list[FieldError] = []
    for future in futures:
        exc = future.exception()
        if exc is None:
            sets.append(future.result())
        elif isinstance(exc, FieldError):
            errors.append(exc)
        else:
            raise exc

    if errors:
        logger.debug(f"Rejected cron schedule {schedule!r} with {len(errors)} field error(s)")
        raise InvalidScheduleError(schedule, errors=errors)

    minute, hour, day, month, weekday = sets
    if not _has_calendar_date(day, month):
        raise UnsatisfiableScheduleError(schedule)

    logger.debug(f"Parsed cron schedule {schedule!r}")
    return Cron(minute, hour, day, month, weekday, expression=schedule, utc=True)


def is_valid(schedule: str) -> bool:
    """Return True if ``schedule`` parses."""
    try:
        parse(schedule)
    except InvalidScheduleError:
        return False
    return True


def parse_field(token: str, field: CronField) -> FieldValueSet:
    """
    Parse one cron field into its set of values.

    Args:
        token: Field text (e.g. "1-4/2,30")
        field: Which field the text belongs to

    Returns:
        FieldValueSet with every selected value

    Raises:
        OutOfRangeError: A literal is outside the bounds or is not a non-negative integer
        InvertedRangeError: A range has start > end
        UnsatisfiableFieldError: The field selects no value
    """
    bounds = FIELD_BOUNDS[field]
    values = FieldValueSet(bounds.max_value + 1)

    for item in token.split(","):
        base, sep, step_s = item.partition("/")
        step = 1
        if sep:
            step = _parse_int(step_s, token, bounds)
            if step == 0:
                raise OutOfRangeError(
                    bounds.name,
                    token,
                    step_s,
                    bounds.min_value,
                    bounds.max_value,
                    reason=f"step in {token!r} must be at least 1",
                )

        if base == "*":
            values.add(*_expand(bounds.min_value, bounds.max_value, step, bounds.offset))
            continue

        if "-" in base:
            start_s, _, end_s = base.partition("-")
            start = _parse_int(start_s, token, bounds)
            end = _parse_int(end_s, token, bounds)
            if start > end:
                raise InvertedRangeError(bounds.name, token, start, end)
            values.add(*_expand(start, end, step, bounds.offset))
            continue

        values.add(_parse_int(base, token, bounds))

    if not values:
        raise UnsatisfiableFieldError(bounds.name, token)
    return values


def _expand(start: int, end: int, step: int, offset: int) -> list[int]:
    """Values in [start, end] whose 0-based index is a multiple of ``step``."""
    return [v for v in range(start, end + 1) if (v - offset) % step == 0]


def _parse_int(text: str, token: str, bounds: FieldBounds) -> int:
    if not _INT_RE.fullmatch(text):
        raise OutOfRangeError(
            bounds.name,
            token,
            text,
            bounds.min_value,
            bounds.max_value,
            reason=f"{text!r} in {token!r} is not a non-negative integer",
        )
    value = int(text)
    if not bounds.in_range(value):
        raise OutOfRangeError(bounds.name, token, text, bounds.min_value, bounds.max_value)
    return value


def _has_calendar_date(day: FieldValueSet, month: FieldValueSet) -> bool:
    return any(d <= _MONTH_LENGTHS[m] for m in month for d in day)
