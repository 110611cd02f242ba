"""Retry decorator with exponential backoff for plain and async callables."""
from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import random
import time
from typing import Any, Callable, Tuple, Type

logger = logging.getLogger(__name__)


def _delay_for(attempt: int, base_delay: float, max_delay: float,
               backoff_factor: float, jitter: bool) -> float:
    delay = min(base_delay * (backoff_factor ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry(
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """Decorator: retries the wrapped function with exponential backoff.

    Coroutine functions are awaited and back off with ``asyncio.sleep`` so the
    event loop keeps running between attempts.
    """

    def _log_failure(fn: Callable, attempt: int, exc: BaseException, delay: float) -> None:
        logger.warning(
            "%s attempt %d/%d failed (%s), retrying in %.1fs",
            fn.__qualname__,
            attempt,
            max_attempts,
            exc,
            delay,
        )

    def _log_exhausted(fn: Callable, exc: BaseException) -> None:
        logger.error(
            "%s failed after %d attempts: %s",
            fn.__qualname__,
            max_attempts,
            exc,
        )

    def decorator(fn: Callable) -> Callable:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                for attempt in range(1, max_attempts + 1):
                    try:
                        return await fn(*args, **kwargs)
                    except retryable as exc:
                        if attempt == max_attempts:
                            _log_exhausted(fn, exc)
                            raise
                        delay = _delay_for(attempt, base_delay, max_delay, backoff_factor, jitter)
                        _log_failure(fn, attempt, exc, delay)
                        await asyncio.sleep(delay)

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if attempt == max_attempts:
                        _log_exhausted(fn, exc)
                        raise
                    delay = _delay_for(attempt, base_delay, max_delay, backoff_factor, jitter)
                    _log_failure(fn, attempt, exc, delay)
                    time.sleep(delay)

        return wrapper

    return decorator
