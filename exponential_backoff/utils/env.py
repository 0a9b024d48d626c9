"""Environment variable parsing for backoff configuration."""

import math
from typing import Mapping, Optional

from ..types import Duration


def _lookup(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def read_float(environ: Mapping[str, str], name: str) -> Optional[float]:
    """
    Read a float from the environment.

    Args:
        environ: Environment mapping
        name: Variable name

    Returns:
        The parsed value, or None if the variable is unset or empty

    Raises:
        ValueError: If the value is not a number
    """
    value = _lookup(environ, name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def read_millis(environ: Mapping[str, str], name: str) -> Optional[Duration]:
    """Read a millisecond count from the environment as a Duration."""
    value = _lookup(environ, name)
    if value is None:
        return None
    try:
        millis = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of milliseconds, got {value!r}") from None
    nanos = millis * 1_000_000
    if not math.isfinite(nanos):
        raise ValueError(f"{name} must be a finite number of milliseconds, got {value!r}")
    return Duration.from_nanos(int(round(nanos)))
