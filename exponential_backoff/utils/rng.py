"""Per-thread random sources for jitter."""

import random
import threading

_local = threading.local()


def thread_source() -> random.Random:
    """
    Return the calling thread's random generator.

    Each thread lazily gets its own ``random.Random`` seeded from the OS,
    so concurrent callers never share generator state.
    """
    source = getattr(_local, "source", None)
    if source is None:
        source = random.Random()
        _local.source = source
    return source
