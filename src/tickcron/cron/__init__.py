"""
Cron schedule parsing and evaluation.
"""

from tickcron.cron.clock import GlobalClock, frozen_clock, now, reset_clock, set_clock
from tickcron.cron.field_set import FieldValueSet
from tickcron.cron.fields import FIELD_BOUNDS, CronField, FieldBounds
from tickcron.cron.parser import is_valid, parse, parse_field
from tickcron.cron.schedule import Cron

__all__ = [
    "Cron",
    "CronField",
    "FieldBounds",
    "FIELD_BOUNDS",
    "FieldValueSet",
    "parse",
    "parse_field",
    "is_valid",
    "GlobalClock",
    "now",
    "set_clock",
    "reset_clock",
    "frozen_clock",
]
