"""Tests for Duration and the jitter sources."""

import random
import threading
from datetime import timedelta

import pytest

from exponential_backoff import Duration
from exponential_backoff.utils.rng import thread_source


def test_constructors_agree():
    assert Duration.from_secs(1) == Duration.from_millis(1000)
    assert Duration.from_millis(1) == Duration.from_micros(1000)
    assert Duration.from_micros(1) == Duration.from_nanos(1000)
    assert Duration.from_secs(0.5) == Duration.from_millis(500)
    assert Duration.from_timedelta(timedelta(seconds=1, microseconds=5)) == Duration(1_000_005_000)


def test_coerce():
    duration = Duration.from_millis(3)

    assert Duration.coerce(duration) is duration
    assert Duration.coerce(timedelta(milliseconds=3)) == duration
    assert Duration.coerce(0.003) == duration
    assert Duration.coerce(2) == Duration.from_secs(2)


@pytest.mark.parametrize("value", ["1s", None, True, [1]])
def test_coerce_rejects_non_durations(value):
    with pytest.raises(TypeError):
        Duration.coerce(value)


def test_conversions_truncate():
    duration = Duration.from_nanos(2_679_687_500)

    assert duration.as_nanos() == 2_679_687_500
    assert duration.as_millis() == 2679
    assert duration.total_seconds() == pytest.approx(2.6796875)
    assert duration.to_timedelta() == timedelta(microseconds=2_679_687)
    assert Duration(-1_500_000).as_millis() == -1


def test_ordering_and_truthiness():
    assert Duration.ZERO < Duration.from_nanos(1) < Duration.MAX
    assert min(Duration.from_secs(5), Duration.from_secs(6)) == Duration.from_secs(5)
    assert not Duration.ZERO
    assert Duration.from_nanos(1)
    assert Duration.MAX.as_nanos() == 2**64 - 1


def test_str():
    assert str(Duration.from_millis(875)) == "0.875s"
    assert str(Duration.from_secs(5)) == "5s"


def test_thread_source_is_per_thread():
    sources = {}

    def worker(name):
        sources[name] = thread_source()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert thread_source() is thread_source()
    assert isinstance(thread_source(), random.Random)
    assert len({id(source) for source in sources.values()} | {id(thread_source())}) == 5


def test_from_secs_saturates_out_of_range_floats():
    assert Duration.from_secs(float("inf")) == Duration.MAX
    assert Duration.from_secs(float("-inf")) == Duration(-Duration.MAX.as_nanos())
    assert Duration.from_secs(1e300) == Duration.MAX
    assert Duration.from_secs(float("nan")) == Duration.ZERO
    assert Duration.coerce(float("inf")) == Duration.MAX
