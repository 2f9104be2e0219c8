"""Exponential backoff around a single LLM call.

Every failure is retried on the same schedule, not just rate limits:
delay after failed attempt k (0-indexed) is min(base * 2**k, max).
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from services.llm.errors import LLMError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 4
BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000


def compute_delay(attempt: int, base_delay_ms: int = BASE_DELAY_MS, max_delay_ms: int = MAX_DELAY_MS) -> int:
    """Backoff in milliseconds before the retry that follows ``attempt``."""
    return min(base_delay_ms * 2**attempt, max_delay_ms)


def _is_rate_limited(error: Exception) -> bool:
    return isinstance(error, LLMError) and error.status == 429


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    base_delay_ms: int = BASE_DELAY_MS,
    max_delay_ms: int = MAX_DELAY_MS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call ``operation`` up to ``max_attempts`` times.

    Returns the first successful result; after the final failed attempt the
    last exception is re-raised unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as e:
            if attempt == max_attempts - 1:
                raise
            delay = compute_delay(attempt, base_delay_ms, max_delay_ms)
            reason = "Rate limited" if _is_rate_limited(e) else "Request failed"
            logger.warning(
                "%s. Retrying in %dms... (attempt %d/%d): %s",
                reason,
                delay,
                attempt + 1,
                max_attempts,
                e,
            )
            await sleep(delay / 1000)

    raise AssertionError("unreachable")
