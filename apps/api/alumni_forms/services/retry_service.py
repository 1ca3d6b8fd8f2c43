"""Retry/backoff for idempotent collaborator reads."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

from alumni_forms.core.config import settings
from alumni_forms.core.errors import CollaboratorError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(max_delay, base_delay * (2**attempt))
    if delay:
        delay = delay + random.uniform(0, delay / 2)
    return delay


async def call_with_retries(
    read_fn: Callable[[], Awaitable[T]],
    *,
    operation: str = "collaborator_read",
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> T:
    """Run a read with exponential backoff.

    Only retryable ``CollaboratorError`` failures are retried; anything else
    (including not-found and validation errors) propagates at once. Never
    wrap writes with this.
    """
    attempts = max_attempts if max_attempts is not None else settings.COLLABORATOR_READ_MAX_ATTEMPTS
    base = base_delay if base_delay is not None else settings.COLLABORATOR_RETRY_BASE_DELAY
    ceiling = max_delay if max_delay is not None else settings.COLLABORATOR_RETRY_MAX_DELAY
    attempts = max(1, attempts)

    for attempt in range(attempts):
        try:
            return await read_fn()
        except CollaboratorError as exc:
            if not exc.retryable or attempt >= attempts - 1:
                raise
            delay = _backoff_delay(attempt, base, ceiling)
            logger.warning(
                "collaborator_read_retry",
                extra={"operation": operation, "attempt": attempt + 1},
                exc_info=exc,
            )
            if delay:
                await asyncio.sleep(delay)
    raise AssertionError("unreachable")
