"""Time authority port.

Services that need the current time inject a TimeAuthorityProtocol
instead of calling ``datetime.now()`` directly, so that expiry and rate
limiting are deterministic under test.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for obtaining timestamps.

    For production use SystemTimeAuthority from
    forum_engine.infrastructure.time. Tests use FakeTimeAuthority from
    tests/helpers/fake_time_authority.py.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time (same as ``now``)."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic clock value in seconds.

        Use this for measuring elapsed time, not for timestamps. Only
        differences between values are meaningful.
        """
        ...
