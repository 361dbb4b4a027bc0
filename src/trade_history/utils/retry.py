"""Retry utilities with exponential backoff."""

import asyncio
import random
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..exceptions import RetriesExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def backoff_delay(
    retry: int,
    initial_delay: float,
    backoff_factor: float = 2.0,
    max_delay: Optional[float] = None,
    jitter: bool = False
) -> float:
    """Delay before retry number `retry` (1-based): initial_delay * factor ** retry."""
    delay = initial_delay * (backoff_factor ** retry)

    if jitter:
        # Add jitter: ±25% of the delay
        jitter_range = delay * 0.25
        delay = delay + random.uniform(-jitter_range, jitter_range)

    if max_delay is not None:
        delay = min(delay, max_delay)

    return max(delay, 0.0)


async def exponential_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: Optional[float] = None,
    jitter: bool = False,
    exceptions: tuple = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> T:
    """
    Execute an async function with exponential backoff retry logic.

    The function is attempted once, then retried up to `max_retries` times.
    Exceptions not listed in `exceptions` propagate immediately.

    Args:
        func: Async function to execute
        max_retries: Maximum number of retries after the first attempt
        initial_delay: Base delay (seconds); retry n waits initial_delay * factor ** n
        backoff_factor: Multiplier applied per retry
        max_delay: Optional cap on a single delay (seconds)
        jitter: Whether to add random jitter to delays
        exceptions: Tuple of exceptions to catch and retry on
        sleep: Awaitable used to wait between attempts

    Returns:
        Result of the function call

    Raises:
        RetriesExhaustedError: if every retry failed with a retryable exception
    """
    for attempt in range(max_retries + 1):
        try:
            return await func()
        except exceptions as e:
            if attempt == max_retries:
                logger.error(f"Giving up after {max_retries} retries: {e}")
                raise RetriesExhaustedError(max_retries, e) from e

            retry = attempt + 1
            delay = backoff_delay(
                retry,
                initial_delay,
                backoff_factor=backoff_factor,
                max_delay=max_delay,
                jitter=jitter
            )

            logger.warning(
                f"Retry {retry}/{max_retries} ({e}), waiting {delay:.3f}s..."
            )

            await sleep(delay)

    # max_retries < 0 never enters the loop
    raise RetriesExhaustedError(max_retries)
