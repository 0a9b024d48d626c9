"""Type definitions for the exponential backoff calculator."""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar, Protocol, Union

NANOS_PER_MICRO = 1_000
NANOS_PER_MILLI = 1_000_000
NANOS_PER_SEC = 1_000_000_000
MAX_NANOS = 2**64 - 1


@dataclass(frozen=True, order=True)
class Duration:
    """
    A span of time as an integer count of nanoseconds.

    Example:
        >>> Duration.from_millis(875)
        Duration(nanoseconds=875000000)
        >>> Duration.from_secs(5) > Duration.from_millis(4689)
        True
    """
    nanoseconds: int

    ZERO: ClassVar["Duration"]
    MAX: ClassVar["Duration"]

    @classmethod
    def from_nanos(cls, nanos: int) -> "Duration":
        """Create a Duration from nanoseconds."""
        return cls(int(nanos))

    @classmethod
    def from_micros(cls, micros: int) -> "Duration":
        """Create a Duration from microseconds."""
        return cls(int(micros) * NANOS_PER_MICRO)

    @classmethod
    def from_millis(cls, millis: int) -> "Duration":
        """Create a Duration from milliseconds."""
        return cls(int(millis) * NANOS_PER_MILLI)

    @classmethod
    def from_secs(cls, seconds: Union[int, float]) -> "Duration":
        """
        Create a Duration from seconds.

        Floats beyond the representable range saturate to ``Duration.MAX``
        with the matching sign; NaN becomes zero.
        """
        if isinstance(seconds, int):
            return cls(seconds * NANOS_PER_SEC)
        nanos = seconds * NANOS_PER_SEC
        if math.isnan(nanos):
            return cls(0)
        if math.isinf(nanos):
            return cls(MAX_NANOS if nanos > 0 else -MAX_NANOS)
        return cls(int(round(nanos)))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Duration":
        """Create a Duration from a ``timedelta``."""
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls.from_micros(micros)

    @classmethod
    def coerce(cls, value: "DurationLike") -> "Duration":
        """
        Convert a duration-like value into a Duration.

        Args:
            value: A Duration, a ``timedelta`` or a number of seconds

        Returns:
            The equivalent Duration

        Raises:
            TypeError: If the value is not duration-like
        """
        if isinstance(value, Duration):
            return value
        if isinstance(value, timedelta):
            return cls.from_timedelta(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.from_secs(value)
        raise TypeError(
            f"Expected Duration, timedelta or seconds, got {type(value).__name__}"
        )

    def as_nanos(self) -> int:
        return self.nanoseconds

    def as_millis(self) -> int:
        return _truncate(self.nanoseconds, NANOS_PER_MILLI)

    def total_seconds(self) -> float:
        return self.nanoseconds / NANOS_PER_SEC

    def to_timedelta(self) -> timedelta:
        """Convert to a ``timedelta``, truncating below one microsecond."""
        return timedelta(microseconds=_truncate(self.nanoseconds, NANOS_PER_MICRO))

    def __bool__(self) -> bool:
        return self.nanoseconds != 0

    def __str__(self) -> str:
        return f"{self.total_seconds():.9g}s"


def _truncate(nanos: int, unit: int) -> int:
    whole = abs(nanos) // unit
    return whole if nanos >= 0 else -whole


Duration.ZERO = Duration(0)
# Largest duration a backoff ever returns; out-of-range results saturate here.
Duration.MAX = Duration(MAX_NANOS)


DurationLike = Union[Duration, timedelta, int, float]


class JitterSource(Protocol):
    """Random source protocol, satisfied by ``random.Random``."""
    def uniform(self, a: float, b: float) -> float: ...
