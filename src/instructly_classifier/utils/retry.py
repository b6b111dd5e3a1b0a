"""Retry decorator utilities for coroutine functions."""

from __future__ import annotations

import asyncio
import logging
from functools import wraps
from typing import Awaitable, Callable, ParamSpec, Tuple, Type, TypeVar

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def async_retry(
    *,
    attempts: int = 2,
    delay: float = 0.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable with exponential backoff.

    ``attempts`` counts the first call, so ``attempts=2`` means one retry.
    """

    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            current_delay = delay
            for attempt in range(attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as exc:
                    if attempt == attempts - 1:
                        raise
                    logger.warning(
                        "retrying_after_failure",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "delay": current_delay,
                            "error": str(exc),
                        },
                    )
                    if current_delay > 0:
                        await asyncio.sleep(current_delay)
                    current_delay *= backoff
            raise RuntimeError("retry failed")  # pragma: no cover - unreachable

        return wrapper

    return decorator
