"""Tests for the injectable clocks."""

from datetime import date, datetime, timezone

from ops_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:

    def test_default_time(self):
        clock = DeterministicClock()

        assert clock.now() == datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert clock.today() == date(2026, 1, 15)

    def test_stable_until_advanced(self):
        clock = DeterministicClock()

        assert clock.now() == clock.now()
        clock.advance(30)
        assert clock.now().second == 30

    def test_advance_days_crosses_year(self):
        clock = DeterministicClock(datetime(2026, 12, 31, 23, 0, tzinfo=timezone.utc))

        clock.advance_days(1)

        assert clock.today() == date(2027, 1, 1)

    def test_set_time_resets_advance(self):
        clock = DeterministicClock()
        clock.advance(100)

        clock.set_time(datetime(2025, 4, 1, tzinfo=timezone.utc))

        assert clock.today() == date(2025, 4, 1)


class TestSystemClock:

    def test_timezone_aware(self):
        assert SystemClock().now().tzinfo is not None
