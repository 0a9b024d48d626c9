"""Exponential backoff builder and calculator."""

import itertools
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional

from .types import Duration, DurationLike, JitterSource
from .utils.env import read_float, read_millis
from .utils.rng import thread_source

logger = logging.getLogger(__name__)

DEFAULT_FACTOR = 1.75
DEFAULT_INTERVAL = Duration.from_millis(500)
DEFAULT_JITTER = Duration.from_millis(150)


class ExponentialBackoffBuilder:
    """
    Configures an ExponentialBackoff instance for use.

    Example:
        >>> backoff = (
        ...     ExponentialBackoffBuilder()
        ...     .factor(1.75)
        ...     .interval(Duration.from_millis(500))
        ...     .jitter(Duration.from_millis(150))
        ...     .max(Duration.from_secs(5))
        ...     .build()
        ... )
        >>>
        >>> for attempt in range(6):
        ...     print(backoff.duration(attempt))
    """

    def __init__(
        self,
        factor: float = DEFAULT_FACTOR,
        interval: DurationLike = DEFAULT_INTERVAL,
        jitter: DurationLike = DEFAULT_JITTER,
        max: Optional[DurationLike] = None,
        rng: Optional[JitterSource] = None
    ):
        """
        Initialize the builder.

        Values are not range checked: a negative factor, a zero interval or a
        jitter larger than the interval are accepted as given.

        Args:
            factor: Growth rate per attempt (default: 1.75)
            interval: Wait at attempt 0 (default: 500ms)
            jitter: Upper bound of the random noise added (default: 150ms)
            max: Cap on any returned duration (default: uncapped)
            rng: Jitter source (default: a generator per calling thread)
        """
        self._factor = factor
        self._interval = Duration.coerce(interval)
        self._jitter = Duration.coerce(jitter)
        self._max = Duration.coerce(max) if max is not None else None
        self._rng = rng

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = "BACKOFF_"
    ) -> "ExponentialBackoffBuilder":
        """
        Create a builder from environment variables.

        Reads ``<prefix>FACTOR``, ``<prefix>INTERVAL_MS``, ``<prefix>JITTER_MS``
        and ``<prefix>MAX_MS``. Unset or empty variables keep their defaults.

        Args:
            environ: Mapping to read from (default: os.environ)
            prefix: Variable name prefix (default: BACKOFF_)

        Raises:
            ValueError: If a variable is set to something that is not a number
        """
        environ = os.environ if environ is None else environ
        builder = cls()

        factor = read_float(environ, f"{prefix}FACTOR")
        if factor is not None:
            builder.factor(factor)

        interval = read_millis(environ, f"{prefix}INTERVAL_MS")
        if interval is not None:
            builder.interval(interval)

        jitter = read_millis(environ, f"{prefix}JITTER_MS")
        if jitter is not None:
            builder.jitter(jitter)

        cap = read_millis(environ, f"{prefix}MAX_MS")
        if cap is not None:
            builder.max(cap)

        return builder

    def factor(self, factor: float) -> "ExponentialBackoffBuilder":
        """Set the backoff factor for the backoff algorithm."""
        self._factor = factor
        return self

    def interval(self, interval: DurationLike) -> "ExponentialBackoffBuilder":
        """Set the base wait interval for the backoff algorithm."""
        self._interval = Duration.coerce(interval)
        return self

    def jitter(self, jitter: DurationLike) -> "ExponentialBackoffBuilder":
        """Set the maximum jitter for the backoff algorithm."""
        self._jitter = Duration.coerce(jitter)
        return self

    def max(self, max: DurationLike) -> "ExponentialBackoffBuilder":
        """Set the maximum duration returned regardless of the attempt."""
        self._max = Duration.coerce(max)
        return self

    def rng(self, source: JitterSource) -> "ExponentialBackoffBuilder":
        """Use a specific random source for jitter, e.g. a seeded ``random.Random``."""
        self._rng = source
        return self

    def build(self) -> "ExponentialBackoff":
        """Finalize the configuration and return a usable ExponentialBackoff."""
        backoff = ExponentialBackoff(
            factor=_to_float(self._factor),
            interval_ns=_to_float(self._interval.as_nanos()),
            jitter_ns=_to_float(self._jitter.as_nanos()),
            max_ns=_clamp(self._max.as_nanos()) if self._max is not None else None,
            rng=self._rng
        )
        logger.debug(
            f"Built exponential backoff (factor={backoff.factor}, "
            f"interval={self._interval}, jitter={self._jitter}, max={self._max})"
        )
        return backoff


@dataclass(frozen=True)
class ExponentialBackoff:
    """
    Calculates backoff durations from the attempt number.

    Instances hold no mutable state and can be shared between threads and
    tasks; the caller tracks the attempt number.
    """
    factor: float
    interval_ns: float
    jitter_ns: float
    max_ns: Optional[int] = None
    rng: Optional[JitterSource] = field(default=None, compare=False, repr=False)

    @staticmethod
    def builder() -> ExponentialBackoffBuilder:
        """Return a builder with the default configuration."""
        return ExponentialBackoffBuilder()

    def duration(self, attempt: int) -> Duration:
        """
        Return the backoff duration for an attempt.

        The wait is ``factor ** attempt * interval`` plus a uniform sample
        from ``[0, jitter]``, truncated to whole nanoseconds and limited to
        the cap when one is set.

        Args:
            attempt: Number of attempts already made (0-indexed)

        Returns:
            Duration to wait before the next attempt
        """
        scaled = self._growth(attempt) * self.interval_ns
        if self.jitter_ns:
            source = self.rng if self.rng is not None else thread_source()
            scaled += source.uniform(0.0, self.jitter_ns)

        nanoseconds = _saturate(scaled)
        if self.max_ns is not None and nanoseconds > self.max_ns:
            return Duration(self.max_ns)
        return Duration(nanoseconds)

    def delays(self, attempts: Optional[int] = None, start: int = 0) -> Iterator[Duration]:
        """
        Yield durations for consecutive attempts.

        Args:
            attempts: Number of durations to yield (default: unlimited)
            start: First attempt number (default: 0)
        """
        counter: Iterator[int] = itertools.count(start)
        if attempts is not None:
            counter = itertools.islice(counter, attempts)
        for attempt in counter:
            yield self.duration(attempt)

    def _growth(self, attempt: int) -> float:
        try:
            return self.factor ** attempt
        except OverflowError:
            if self.factor < 0 and attempt % 2:
                return -math.inf
            return math.inf
        except ZeroDivisionError:
            # 0.0 raised to a negative power
            return math.inf


def _saturate(nanoseconds: float) -> int:
    """Truncate to whole nanoseconds, clamped to [0, Duration.MAX]."""
    if math.isnan(nanoseconds) or nanoseconds < 0:
        logger.debug(f"Backoff of {nanoseconds}ns saturated to zero")
        return 0
    if nanoseconds >= Duration.MAX.nanoseconds:
        logger.debug(f"Backoff of {nanoseconds}ns saturated to {Duration.MAX.nanoseconds}ns")
        return Duration.MAX.nanoseconds
    return int(nanoseconds)


def _to_float(value: float) -> float:
    """Convert to float, mapping integers beyond float range to signed infinity."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _clamp(nanoseconds: int) -> int:
    return min(max(nanoseconds, 0), Duration.MAX.nanoseconds)
