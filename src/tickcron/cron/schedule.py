"""
Parsed cron schedule and its match / next / previous queries.

A ``Cron`` is built by ``tickcron.cron.parser.parse`` and is read-only after
that, apart from the one-way ``use_local()`` switch. Concurrent queries from
several threads are safe as long as ``use_local()`` is called before the
instance is shared.

Time zones:
- UTC mode (default): instants are converted to UTC before fields are read.
- Local mode: instants are converted to the system's local zone.
- Naive datetimes are taken to already be in the schedule's zone.

Searches walk absolute minutes and read each one in the configured zone, so a
DST change never switches zones mid-search.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from tickcron.cron import clock
from tickcron.cron.field_set import FieldValueSet
from tickcron.cron.fields import FIELD_ORDER, CronField

_MINUTE = timedelta(minutes=1)


def _truncate(instant: datetime) -> datetime:
    return instant.replace(second=0, microsecond=0)


def _cron_weekday(instant: datetime) -> int:
    # Python: Monday=0..Sunday=6; cron: Sunday=0..Saturday=6
    return (instant.weekday() + 1) % 7


class Cron:
    """Five parsed cron fields plus the UTC/local mode."""

    def __init__(
        self,
        minute: FieldValueSet,
        hour: FieldValueSet,
        day: FieldValueSet,
        month: FieldValueSet,
        weekday: FieldValueSet,
        *,
        expression: str = "",
        utc: bool = True,
    ) -> None:
        self.minute = minute
        self.hour = hour
        self.day = day
        self.month = month
        self.weekday = weekday
        self.expression = expression
        self._utc = utc

    # --- time zone mode ------------------------------------------------------

    @property
    def is_utc(self) -> bool:
        return self._utc

    def use_local(self) -> None:
        """Evaluate all later queries in the system's local time zone."""
        self._utc = False

    def _view(self, instant: datetime) -> datetime:
        """Express ``instant`` in the configured zone."""
        if self._utc:
            if instant.tzinfo is None:
                return instant.replace(tzinfo=timezone.utc)
            return instant.astimezone(timezone.utc)
        # astimezone() on a naive datetime treats it as local time
        return instant.astimezone()

    @property
    def fields(self) -> dict[CronField, FieldValueSet]:
        sets = (self.minute, self.hour, self.day, self.month, self.weekday)
        return dict(zip(FIELD_ORDER, sets))

    # --- queries -------------------------------------------------------------

    def now(self) -> datetime:
        """Current instant from the global clock, truncated to the minute, in the schedule's zone."""
        return _truncate(self._view(clock.now()))

    def matches(self, instant: datetime | None = None) -> bool:
        """
        Check whether ``instant`` is an activation minute.

        All five fields must match; day-of-month and weekday are ANDed.

        Args:
            instant: Instant to test (default: the global clock's now)
        """
        view = self.now() if instant is None else self._view(instant)
        return self._matches_date(view) and view.hour in self.hour and view.minute in self.minute

    def is_due_now(self) -> bool:
        """True if the current minute is an activation minute."""
        return self.matches(None)

    def _matches_date(self, view: datetime) -> bool:
        return view.month in self.month and view.day in self.day and _cron_weekday(view) in self.weekday

    def next_after(self, instant: datetime) -> datetime:
        """
        Find the first activation minute strictly after ``instant``'s minute.

        Walks forward one minute at a time from ``instant + 1 minute``
        (truncated). While the date or hour cannot match, the walk jumps to the
        next hour boundary; the result is still the earliest match.

        Returns:
            Aware datetime in the schedule's zone
        """
        cursor = _truncate(self._view(instant)).astimezone(timezone.utc) + _MINUTE
        # Parsing guarantees some calendar date matches, so this terminates.
        while True:
            view = self._view(cursor)
            if not self._matches_date(view) or view.hour not in self.hour:
                cursor += timedelta(minutes=60 - view.minute)
                continue
            if view.minute in self.minute:
                return view
            cursor += _MINUTE

    def previous_before(self, instant: datetime) -> datetime:
        """
        Find the last activation minute strictly before ``instant``'s minute.

        Mirror image of ``next_after``, starting at ``instant - 1 minute``.
        """
        cursor = _truncate(self._view(instant)).astimezone(timezone.utc) - _MINUTE
        while True:
            view = self._view(cursor)
            if not self._matches_date(view) or view.hour not in self.hour:
                cursor -= timedelta(minutes=view.minute + 1)
                continue
            if view.minute in self.minute:
                return view
            cursor -= _MINUTE

    def next(self) -> datetime:
        """Next activation after the global clock's now."""
        return self.next_after(self.now())

    def previous(self) -> datetime:
        """Previous activation before the global clock's now."""
        return self.previous_before(self.now())

    def next_n(self, count: int, after: datetime | None = None) -> list[datetime]:
        """Return the next ``count`` activations after ``after`` (default: now)."""
        cursor = self.now() if after is None else after
        result: list[datetime] = []
        for _ in range(count):
            cursor = self.next_after(cursor)
            result.append(cursor)
        return result

    def previous_n(self, count: int, before: datetime | None = None) -> list[datetime]:
        """Return the previous ``count`` activations before ``before`` (default: now), newest first."""
        cursor = self.now() if before is None else before
        result: list[datetime] = []
        for _ in range(count):
            cursor = self.previous_before(cursor)
            result.append(cursor)
        return result

    # --- dunder --------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cron):
            return NotImplemented
        return self.fields == other.fields and self._utc == other._utc

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        zone = "utc" if self._utc else "local"
        return f"Cron({self.expression!r}, {zone})"
