"""
Clock abstraction.

Every timestamp jobwatch writes comes from an injected ``Clock`` so that
record mutations are deterministic under test.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware UTC datetime."""
        ...


class SystemClock(Clock):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock frozen at a single instant until explicitly advanced."""

    def __init__(self, instant: datetime | None = None):
        instant = instant or datetime.now(timezone.utc)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, seconds: float) -> datetime:
        """Move the clock forward and return the new instant."""
        self._instant = self._instant + timedelta(seconds=seconds)
        return self._instant


__all__ = ["Clock", "SystemClock", "FixedClock"]
