"""
Clock -- injectable source of "now" for the quoting kernel.

Responsibility:
    Supplies the instant stamped on new proposals, copies and vouchers, and
    the year embedded in proposal references.  Services receive a Clock in
    their constructor and never read the system time themselves.

Architecture position:
    Kernel > Domain.  SystemClock is the only place the kernel reads the
    wall clock.

Failure modes:
    None.  Every clock returns timezone-aware UTC datetimes.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current UTC instant."""

    @abstractmethod
    def now_utc(self) -> datetime:
        """Current instant, timezone-aware, in UTC."""
        ...

    def today(self) -> date:
        """Calendar date of ``now_utc()``."""
        return self.now_utc().date()


class SystemClock(Clock):
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock frozen at a chosen instant, moved only by the caller.

    Tests use it so that created_at ordering and reference years are
    reproducible: create, ``advance(60)``, create again.
    """

    DEFAULT_START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __init__(self, start: datetime | None = None):
        start = start or self.DEFAULT_START
        if start.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware start")
        self._current = start.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._current

    def advance(self, seconds: float = 1) -> datetime:
        """Move forward and return the new instant."""
        self._current += timedelta(seconds=seconds)
        return self._current

    def set_time(self, when: datetime) -> None:
        if when.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware time")
        self._current = when.astimezone(timezone.utc)
