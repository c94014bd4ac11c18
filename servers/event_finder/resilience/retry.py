"""Retry with exponential backoff for transient upstream failures."""

import asyncio
import random
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> float:
    """Delay before retry number `attempt` (0-based)."""
    delay = min(base_delay * (exponential_base**attempt), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry_with_backoff(
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for async retry with exponential backoff.

    Only `retryable_exceptions` are retried; anything else propagates
    on the first occurrence.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt == max_attempts - 1:
                        logger.warning(
                            "retry_exhausted",
                            function=func.__qualname__,
                            max_attempts=max_attempts,
                            error=str(e),
                        )
                        raise

                    delay = backoff_delay(
                        attempt, base_delay, max_delay, exponential_base, jitter
                    )
                    logger.info(
                        "retry_attempt",
                        function=func.__qualname__,
                        attempt=attempt + 1,
                        max_attempts=max_attempts,
                        delay=round(delay, 2),
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError("max_attempts must be at least 1")

        return wrapper

    return decorator


async def retry_once(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Call `func` with retry logic (non-decorator version)."""
    decorated = retry_with_backoff(
        max_attempts=max_attempts,
        base_delay=base_delay,
        retryable_exceptions=retryable_exceptions,
    )(func)
    return await decorated(*args, **kwargs)
