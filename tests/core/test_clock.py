# tests/core/test_clock.py
"""Tests for clock abstraction."""

from datetime import UTC, datetime, timedelta

import pytest

from trashcan.core.clock import DEFAULT_CLOCK, MockClock, SystemClock


class TestSystemClock:
    def test_returns_aware_utc(self) -> None:
        now = SystemClock().now()

        assert now.tzinfo is UTC
        assert abs(datetime.now(UTC) - now) < timedelta(seconds=5)

    def test_default_clock_is_system_clock(self) -> None:
        assert isinstance(DEFAULT_CLOCK, SystemClock)


class TestMockClock:
    """Controllable clock for deterministic tests."""

    def test_starts_at_given_time(self) -> None:
        start = datetime(2024, 1, 29, tzinfo=UTC)

        assert MockClock(start).now() == start

    def test_advance(self) -> None:
        clock = MockClock(datetime(2024, 1, 29, tzinfo=UTC))

        clock.advance(timedelta(days=1))

        assert clock.now() == datetime(2024, 1, 30, tzinfo=UTC)

    def test_advance_rejects_negative(self) -> None:
        clock = MockClock(datetime(2024, 1, 29, tzinfo=UTC))

        with pytest.raises(ValueError, match="negative"):
            clock.advance(timedelta(seconds=-1))

    def test_set_allows_going_back(self) -> None:
        clock = MockClock(datetime(2024, 1, 29, tzinfo=UTC))

        clock.set(datetime(2023, 1, 1, tzinfo=UTC))

        assert clock.now() == datetime(2023, 1, 1, tzinfo=UTC)

    def test_rejects_naive_datetimes(self) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            MockClock(datetime(2024, 1, 29))

        clock = MockClock(datetime(2024, 1, 29, tzinfo=UTC))
        with pytest.raises(ValueError, match="timezone-aware"):
            clock.set(datetime(2024, 1, 29))
