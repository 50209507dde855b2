"""
Tests for the process-wide clock.
"""

from datetime import datetime, timezone

from tickcron.cron import clock
from tickcron.cron.clock import GlobalClock, frozen_clock, reset_clock, set_clock, system_now

FIXED = datetime(2023, 6, 17, 18, 23, tzinfo=timezone.utc)


class TestGlobalClock:
    """Tests for swapping the time source."""

    def test_default_is_system_clock(self):
        assert GlobalClock.get_clock() is system_now
        assert clock.now().tzinfo is not None

    def test_set_and_reset(self):
        set_clock(lambda: FIXED)
        assert clock.now() == FIXED
        reset_clock()
        assert GlobalClock.get_clock() is system_now

    def test_frozen_clock_restores_previous_provider(self):
        later = datetime(2030, 1, 1, tzinfo=timezone.utc)
        set_clock(lambda: FIXED)
        with frozen_clock(later) as pinned:
            assert pinned == later
            assert clock.now() == later
        assert clock.now() == FIXED

    def test_frozen_clock_restores_on_error(self):
        try:
            with frozen_clock(FIXED):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert GlobalClock.get_clock() is system_now
