"""Retry with exponential backoff for async I/O calls."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

log = logging.getLogger("devpulse.resilience")

T = TypeVar("T")


def retry_async(
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    exceptions: tuple[type[BaseException], ...] = (Exception,),
    should_retry: Callable[[BaseException], bool] | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator: retry a coroutine function with bounded exponential backoff.

    Parameters
    ----------
    max_attempts:
        Total number of attempts (including the first).
    base_delay:
        Initial delay in seconds between retries.
    max_delay:
        Maximum delay cap.
    backoff_factor:
        Multiplier applied to delay after each failure.
    exceptions:
        Tuple of exception classes that may trigger a retry.
    should_retry:
        Optional predicate; a caught exception for which it returns False
        is re-raised immediately.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = base_delay
            last_exc: BaseException | None = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if should_retry is not None and not should_retry(e):
                        raise
                    last_exc = e
                    if attempt == max_attempts:
                        break
                    log.warning(
                        "Retry %d/%d for %s: %s (delay %.1fs)",
                        attempt, max_attempts, func.__name__, e, delay,
                    )
                    await asyncio.sleep(delay)
                    delay = min(delay * backoff_factor, max_delay)
            raise last_exc  # type: ignore[misc]

        return wrapper
    return decorator
