"""Shared fixtures for backoff tests."""

import pytest

from exponential_backoff import Duration, ExponentialBackoffBuilder


class FixedSource:
    """Jitter source that always returns the same fraction of the range."""

    def __init__(self, fraction: float):
        self.fraction = fraction
        self.calls = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        return a + (b - a) * self.fraction


@pytest.fixture
def no_jitter_builder():
    return (
        ExponentialBackoffBuilder()
        .jitter(Duration.ZERO)
        .max(Duration.from_secs(5))
    )


@pytest.fixture
def expected_no_jitter():
    return [
        Duration.from_millis(500),
        Duration.from_millis(875),
        Duration.from_nanos(1531250000),
        Duration.from_nanos(2679687500),
        Duration.from_nanos(4689453125),
        Duration.from_secs(5),
    ]
