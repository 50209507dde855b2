"""
Tests for Cron evaluation: matches, next/previous search, time zone mode.

The reference instant for most tests is Saturday 2023-06-17 18:23 UTC.
"""

import time
from datetime import datetime, timedelta, timezone

import pytest

from tickcron.cron.clock import frozen_clock
from tickcron.cron.parser import parse

UTC = timezone.utc
REFERENCE = datetime(2023, 6, 17, 18, 23, 0, tzinfo=UTC)

needs_tzset = pytest.mark.skipif(not hasattr(time, "tzset"), reason="time.tzset() not available")

# POSIX TZ strings work without a tz database on the host
US_EASTERN = "EST+5EDT,M3.2.0/2,M11.1.0/2"
PLUS_TWO = "XYZ-2"


@pytest.fixture
def local_tz(monkeypatch):
    """Switch the process local time zone for one test."""

    def _set(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


class TestNext:
    """Tests for next_after / next."""

    @pytest.mark.parametrize(
        "schedule,want",
        [
            ("* * * * *", datetime(2023, 6, 17, 18, 24, tzinfo=UTC)),
            ("*/5 * * * *", datetime(2023, 6, 17, 18, 25, tzinfo=UTC)),
            ("0 * * * *", datetime(2023, 6, 17, 19, 0, tzinfo=UTC)),
            ("0 0 * * *", datetime(2023, 6, 18, 0, 0, tzinfo=UTC)),
            ("0 0 1 * *", datetime(2023, 7, 1, 0, 0, tzinfo=UTC)),
            ("0 0 1 1 *", datetime(2024, 1, 1, 0, 0, tzinfo=UTC)),
        ],
        ids=["next min", "next 5th min", "top of the hour", "midnight", "first of month", "first of year"],
    )
    def test_next(self, schedule, want):
        with frozen_clock(REFERENCE):
            assert parse(schedule).next() == want

    def test_next_after_explicit_instant(self):
        cron = parse("0 9 * * 1")
        # Jan 15, 2024 is a Monday; 9am already passed
        result = cron.next_after(datetime(2024, 1, 15, 10, 0, tzinfo=UTC))
        assert result == datetime(2024, 1, 22, 9, 0, tzinfo=UTC)

    def test_next_truncates_seconds(self):
        cron = parse("* * * * *")
        result = cron.next_after(datetime(2023, 6, 17, 18, 23, 45, 123456, tzinfo=UTC))
        assert result == datetime(2023, 6, 17, 18, 24, tzinfo=UTC)
        assert result.second == 0 and result.microsecond == 0

    @pytest.mark.parametrize(
        "instant",
        [
            datetime(2023, 6, 17, 18, 23, tzinfo=UTC),
            datetime(2023, 12, 31, 23, 59, tzinfo=UTC),
            datetime(2024, 2, 28, 23, 59, tzinfo=UTC),
            datetime(2024, 2, 29, 12, 0, tzinfo=UTC),
        ],
    )
    def test_every_minute_is_one_minute_later(self, instant):
        cron = parse("* * * * *")
        assert cron.next_after(instant) == instant + timedelta(minutes=1)
        assert cron.previous_before(instant) == instant - timedelta(minutes=1)

    def test_leap_day(self):
        cron = parse("0 0 29 2 *")
        assert cron.next_after(REFERENCE) == datetime(2024, 2, 29, tzinfo=UTC)
        assert cron.previous_before(REFERENCE) == datetime(2020, 2, 29, tzinfo=UTC)

    def test_day_and_weekday_are_anded(self):
        """Friday the 13th: both day-of-month and weekday must match."""
        cron = parse("0 0 13 * 5")
        assert cron.next_after(REFERENCE) == datetime(2023, 10, 13, tzinfo=UTC)
        assert cron.previous_before(REFERENCE) == datetime(2023, 1, 13, tzinfo=UTC)

    def test_next_is_minimal_match(self):
        """No minute strictly between the reference and the result matches."""
        cron = parse("*/7 3-5 * * 1-5")
        result = cron.next_after(REFERENCE)
        assert cron.matches(result)
        assert result > REFERENCE
        cursor = REFERENCE + timedelta(minutes=1)
        while cursor < result:
            assert not cron.matches(cursor)
            cursor += timedelta(minutes=1)

    def test_next_n(self):
        cron = parse("0 0 1 1 *")
        assert cron.next_n(3, after=REFERENCE) == [
            datetime(2024, 1, 1, tzinfo=UTC),
            datetime(2025, 1, 1, tzinfo=UTC),
            datetime(2026, 1, 1, tzinfo=UTC),
        ]


class TestPrevious:
    """Tests for previous_before / previous."""

    @pytest.mark.parametrize(
        "schedule,want",
        [
            ("* * * * *", datetime(2023, 6, 17, 18, 22, tzinfo=UTC)),
            ("*/5 * * * *", datetime(2023, 6, 17, 18, 20, tzinfo=UTC)),
            ("0 * * * *", datetime(2023, 6, 17, 18, 0, tzinfo=UTC)),
            ("0 0 * * *", datetime(2023, 6, 17, 0, 0, tzinfo=UTC)),
            ("0 0 1 * *", datetime(2023, 6, 1, 0, 0, tzinfo=UTC)),
            ("0 0 1 1 *", datetime(2023, 1, 1, 0, 0, tzinfo=UTC)),
        ],
        ids=["prev min", "prev 5th min", "top of the hour", "midnight", "first of month", "first of year"],
    )
    def test_previous(self, schedule, want):
        with frozen_clock(REFERENCE):
            assert parse(schedule).previous() == want

    def test_previous_is_maximal_match(self):
        cron = parse("45 */6 * * 0")
        result = cron.previous_before(REFERENCE)
        assert cron.matches(result)
        assert result < REFERENCE
        cursor = REFERENCE - timedelta(minutes=1)
        while cursor > result:
            assert not cron.matches(cursor)
            cursor -= timedelta(minutes=1)

    def test_previous_n_newest_first(self):
        cron = parse("0 12 * * *")
        assert cron.previous_n(2, before=REFERENCE) == [
            datetime(2023, 6, 17, 12, 0, tzinfo=UTC),
            datetime(2023, 6, 16, 12, 0, tzinfo=UTC),
        ]


class TestMatches:
    """matches() is true iff all five fields match."""

    # Monday 2023-04-03 10:15 UTC
    INSTANT = datetime(2023, 4, 3, 10, 15, tzinfo=UTC)

    def test_all_fields_match(self):
        assert parse("15 10 3 4 1").matches(self.INSTANT) is True

    @pytest.mark.parametrize(
        "schedule",
        ["16 10 3 4 1", "15 11 3 4 1", "15 10 4 4 1", "15 10 3 5 1", "15 10 3 4 2"],
        ids=["minute", "hour", "day", "month", "weekday"],
    )
    def test_one_field_mismatch(self, schedule):
        assert parse(schedule).matches(self.INSTANT) is False

    def test_sunday_is_zero(self):
        # 2023-06-18 is a Sunday
        assert parse("* * * * 0").matches(datetime(2023, 6, 18, 8, 0, tzinfo=UTC))
        assert not parse("* * * * 6").matches(datetime(2023, 6, 18, 8, 0, tzinfo=UTC))

    def test_naive_instant_is_read_as_utc(self):
        cron = parse("23 18 * * *")
        assert cron.matches(datetime(2023, 6, 17, 18, 23))

    def test_aware_instant_is_converted_to_utc(self):
        cron = parse("23 18 * * *")
        plus_two = timezone(timedelta(hours=2))
        assert cron.matches(datetime(2023, 6, 17, 20, 23, tzinfo=plus_two))
        assert not cron.matches(datetime(2023, 6, 17, 18, 23, tzinfo=plus_two))

    def test_next_after_converts_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        result = parse("0 19 * * *").next_after(datetime(2023, 6, 17, 20, 23, tzinfo=plus_two))
        assert result == datetime(2023, 6, 17, 19, 0, tzinfo=UTC)
        assert result.tzinfo == UTC


class TestNow:
    """Tests for is_due_now and now."""

    @pytest.mark.parametrize(
        "schedule,want",
        [
            ("* * * * *", True),
            ("5 * * * *", False),
            ("* 5 * * *", False),
            ("* * 5 * *", False),
            ("* * * 5 *", False),
            ("* * * * 5", False),
        ],
        ids=["is now", "not now - min", "not now - hour", "not now - day", "not now - month", "not now - weekday"],
    )
    def test_is_due_now(self, schedule, want):
        with frozen_clock(REFERENCE):
            cron = parse(schedule)
            assert cron.is_due_now() is want
            assert cron.matches() is want

    def test_now_truncates_to_minute(self):
        with frozen_clock(datetime(2023, 6, 17, 18, 23, 30, 500, tzinfo=UTC)):
            assert parse("* * * * *").now() == REFERENCE


@needs_tzset
class TestLocalMode:
    """Switching to the local zone."""

    def test_use_local_changes_zone_of_now(self, local_tz):
        local_tz(PLUS_TWO)
        cron = parse("* * * * *")
        cron.use_local()
        with frozen_clock(datetime(2023, 6, 17, 18, 23, 30, tzinfo=UTC)):
            now = cron.now()
        assert now.utcoffset() == timedelta(hours=2)
        assert (now.hour, now.minute, now.second) == (20, 23, 0)
        assert now == REFERENCE

    def test_use_local_keeps_field_sets(self, local_tz):
        local_tz(PLUS_TWO)
        cron = parse("*/5 1-4 */5 * 1-5")
        before = dict(cron.fields)
        cron.use_local()
        assert cron.is_utc is False
        assert cron.fields == before

    def test_local_mode_changes_due_minute(self, local_tz):
        local_tz(PLUS_TWO)
        utc_cron = parse("23 20 * * *")
        local_cron = parse("23 20 * * *")
        local_cron.use_local()
        with frozen_clock(REFERENCE):
            assert utc_cron.is_due_now() is False
            assert local_cron.is_due_now() is True

    def test_local_next_and_previous(self, local_tz):
        local_tz(PLUS_TWO)
        cron = parse("0 0 * * *")
        cron.use_local()
        with frozen_clock(REFERENCE):
            nxt = cron.next()
            prev = cron.previous()
        assert nxt == datetime(2023, 6, 17, 22, 0, tzinfo=UTC)
        assert prev == datetime(2023, 6, 16, 22, 0, tzinfo=UTC)
        assert nxt.utcoffset() == timedelta(hours=2)

    def test_spring_forward_skips_missing_local_time(self, local_tz):
        local_tz(US_EASTERN)
        cron = parse("30 2 * * *")
        cron.use_local()
        # 2023-03-12 02:30 does not exist in US/Eastern
        result = cron.next_after(datetime(2023, 3, 11, 12, 0, tzinfo=UTC))
        assert result == datetime(2023, 3, 13, 6, 30, tzinfo=UTC)
        assert (result.day, result.hour, result.minute) == (13, 2, 30)

    def test_fall_back_repeated_hour_matches_twice(self, local_tz):
        local_tz(US_EASTERN)
        cron = parse("30 1 * * *")
        cron.use_local()
        first = cron.next_after(datetime(2023, 11, 5, 4, 0, tzinfo=UTC))
        second = cron.next_after(first)
        assert first == datetime(2023, 11, 5, 5, 30, tzinfo=UTC)
        assert second == datetime(2023, 11, 5, 6, 30, tzinfo=UTC)
        assert first.hour == second.hour == 1


class TestCronObject:
    def test_equality(self):
        assert parse("*/5 * * * *") == parse("0-59/5 * * * *")
        assert parse("*/5 * * * *") != parse("*/10 * * * *")

    def test_local_mode_affects_equality(self):
        a = parse("* * * * *")
        b = parse("* * * * *")
        b.use_local()
        assert a != b

    def test_repr(self):
        assert repr(parse("0 0 1 1 *")) == "Cron('0 0 1 1 *', utc)"
