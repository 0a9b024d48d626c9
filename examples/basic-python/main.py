"""
Basic Python example for exponential backoff

This is a minimal working example showing how to:
- Configure a backoff from the environment
- Drive a retry loop with it
- Give up after a fixed number of attempts
"""

import asyncio
import logging
import os
import random

from dotenv import load_dotenv
from exponential_backoff import ExponentialBackoffBuilder

# Load environment variables (BACKOFF_FACTOR, BACKOFF_INTERVAL_MS, ...)
load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger("basic-python")

MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", "6"))

backoff = ExponentialBackoffBuilder.from_env().build()


async def flaky_operation() -> str:
    """Fails most of the time, like a congested upstream."""
    if random.random() < 0.7:
        raise ConnectionError("upstream unavailable")
    return "ok"


async def call_with_retries() -> str:
    for attempt in range(MAX_ATTEMPTS):
        try:
            return await flaky_operation()
        except ConnectionError as e:
            if attempt == MAX_ATTEMPTS - 1:
                raise

            delay = backoff.duration(attempt)
            logger.info(
                f"Attempt {attempt + 1}/{MAX_ATTEMPTS} failed ({e}), "
                f"retrying in {delay.total_seconds():.3f}s"
            )
            await asyncio.sleep(delay.total_seconds())

    raise RuntimeError("MAX_ATTEMPTS must be at least 1")


if __name__ == "__main__":
    print("Backoff schedule without retrying:")
    for attempt, delay in enumerate(backoff.delays(MAX_ATTEMPTS)):
        print(f"   attempt {attempt}: {delay}")

    try:
        result = asyncio.run(call_with_retries())
        print(f"Succeeded: {result}")
    except ConnectionError as e:
        print(f"Gave up: {e}")
        exit(1)
