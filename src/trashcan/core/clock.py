# src/trashcan/core/clock.py
"""Clock abstraction for testable retention logic.

Retention eligibility depends on wall-clock time ("archived more than N days
ago"). This module lets production code read the real UTC time while tests
inject MockClock to pin and advance it.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Abstract wall clock.

    Implementations:
    - SystemClock: Uses datetime.now(UTC) (production)
    - MockClock: Returns controllable times (testing)
    """

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class SystemClock:
    """Production clock using the system's UTC wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(datetime(2024, 1, 29, tzinfo=UTC))
        cleaner = TrashcanCleaner(..., clock=clock)

        clock.advance(timedelta(days=1))
        cleaner.clean()  # Sees 2024-01-30
    """

    def __init__(self, start: datetime) -> None:
        """Initialize mock clock at a given time.

        Args:
            start: Initial time. Must be timezone-aware.

        Raises:
            ValueError: If start is naive.
        """
        if start.tzinfo is None:
            raise ValueError("MockClock requires a timezone-aware datetime")
        self._current = start

    def now(self) -> datetime:
        return self._current

    def advance(self, delta: timedelta) -> None:
        """Advance mock time.

        Raises:
            ValueError: If delta is negative.
        """
        if delta < timedelta(0):
            raise ValueError(f"Cannot advance time by negative amount: {delta}")
        self._current += delta

    def set(self, value: datetime) -> None:
        """Set mock time to an absolute value, including earlier times."""
        if value.tzinfo is None:
            raise ValueError("MockClock requires a timezone-aware datetime")
        self._current = value


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
