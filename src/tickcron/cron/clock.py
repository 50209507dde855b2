"""
Process-wide clock used by the schedule queries that take no explicit instant.

Defaults to the system clock. Tests (and embedding applications) may swap it
for a fixed or synthetic source; production code never swaps it while a
query is running.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime


def system_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


class GlobalClock:
    """Global "current time" provider."""

    _provider: Callable[[], datetime] = staticmethod(system_now)
    _lock = threading.Lock()

    @classmethod
    def set_clock(cls, provider: Callable[[], datetime]) -> None:
        """Replace the current time provider."""
        with cls._lock:
            cls._provider = staticmethod(provider)

    @classmethod
    def get_clock(cls) -> Callable[[], datetime]:
        """Get the current time provider."""
        return cls._provider

    @classmethod
    def reset_clock(cls) -> None:
        """Restore the system clock (for testing)."""
        with cls._lock:
            cls._provider = staticmethod(system_now)


def now() -> datetime:
    """Return the current instant from the global provider."""
    return GlobalClock.get_clock()()


def set_clock(provider: Callable[[], datetime]) -> None:
    GlobalClock.set_clock(provider)


def reset_clock() -> None:
    GlobalClock.reset_clock()


@contextmanager
def frozen_clock(instant: datetime) -> Iterator[datetime]:
    """
    Pin the global clock to ``instant`` for the duration of the block.

    Usage:
        with frozen_clock(datetime(2023, 6, 17, 18, 23, tzinfo=timezone.utc)):
            assert parse("*/5 * * * *").next().minute == 25
    """
    previous = GlobalClock.get_clock()
    GlobalClock.set_clock(lambda: instant)
    try:
        yield instant
    finally:
        GlobalClock.set_clock(previous)
