"""Exponential backoff duration calculator for Python."""

from .backoff import ExponentialBackoff, ExponentialBackoffBuilder
from .types import (
    Duration,
    DurationLike,
    JitterSource
)

__version__ = "1.0.0"
__all__ = [
    "ExponentialBackoff",
    "ExponentialBackoffBuilder",
    "Duration",
    "DurationLike",
    "JitterSource"
]
