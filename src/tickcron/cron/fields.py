"""
Cron field definitions.

Bounds for each of the five schedule fields, in schedule order. Day-of-month
and month are 1-based; their ``offset`` shifts values to a 0-based index
before step arithmetic so that ``*/5`` on day-of-month means 1, 6, 11, ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CronField(Enum):
    """The five fields of a cron schedule, in the order they appear."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day"
    MONTH = "month"
    DAY_OF_WEEK = "weekday"


@dataclass(frozen=True)
class FieldBounds:
    """Legal value range for a cron field."""

    name: str
    min_value: int
    max_value: int
    offset: int = 0

    def in_range(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


FIELD_BOUNDS: dict[CronField, FieldBounds] = {
    CronField.MINUTE: FieldBounds("minute", 0, 59),
    CronField.HOUR: FieldBounds("hour", 0, 23),
    CronField.DAY_OF_MONTH: FieldBounds("day", 1, 31, offset=1),
    CronField.MONTH: FieldBounds("month", 1, 12, offset=1),
    CronField.DAY_OF_WEEK: FieldBounds("weekday", 0, 6),
}

# Schedule order; index i is the i-th space-separated field.
FIELD_ORDER: tuple[CronField, ...] = tuple(CronField)
