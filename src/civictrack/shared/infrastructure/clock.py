"""
Clock
=====

Time sources injected into the engine.

Deadlines and SLA buckets depend on "now"; every component that needs it
asks an ``IClock`` instead of calling ``datetime.now`` directly, so a test
or a replay can pin time to a known instant.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class IClock(ABC):
    """Interface for the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware time."""


class SystemClock(IClock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(IClock):
    """
    Clock frozen at a given instant.

    Only moves when told to, via ``advance`` or ``set``.
    """

    def __init__(self, instant: datetime):
        self._instant = ensure_aware(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = ensure_aware(instant)

    def advance(self, delta: timedelta) -> datetime:
        self._instant = self._instant + delta
        return self._instant


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
