"""
Time sources used for deadlines and profiling.
"""

from datetime import datetime, timezone


class Clock:
    """Source of the current instant."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
