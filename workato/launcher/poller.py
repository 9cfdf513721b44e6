"""Bounded fixed-interval polling."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from workato.launcher.errors import PollingTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 100
DEFAULT_DELAY = 5.0


async def wait_until_complete(
    check: Callable[[], Awaitable[T | None]],
    attempts: int = DEFAULT_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Invoke check until it yields a terminal value.

    Args:
        check: Zero-argument coroutine function returning a terminal value
            or None while the operation is still running
        attempts: Maximum number of check invocations
        delay: Seconds to wait between invocations
        sleep: Coroutine used to wait between invocations

    Returns:
        First terminal value returned by check

    Raises:
        PollingTimeout: If check never returns a terminal value

    """
    for attempt in range(1, attempts + 1):
        result = await check()
        if result is not None:
            logger.debug(f"Terminal result after {attempt} attempt(s)")
            return result

        if attempt < attempts:
            await sleep(delay)

    logger.error(f"Polling budget of {attempts} attempts exhausted")
    raise PollingTimeout(attempts, delay)
