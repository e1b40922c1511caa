"""HTTP helpers with retry/backoff for the backend API."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUSES = {429, 500, 502, 503, 504}


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Exponential delay for a zero-based attempt, with up to 50% jitter."""
    delay = min(max_delay, base_delay * (2**attempt))
    if delay:
        delay = delay + random.uniform(0, delay / 2)
    return delay


async def request_with_retries(
    request_fn: Callable[[], Awaitable[httpx.Response]],
    *,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    retry_statuses: set[int] | None = None,
) -> httpx.Response:
    """Execute an HTTP request, retrying transport errors and retryable statuses."""
    statuses = retry_statuses or DEFAULT_RETRY_STATUSES
    attempts = max(max_attempts, 1)

    for attempt in range(attempts):
        is_last = attempt >= attempts - 1
        try:
            response = await request_fn()
        except httpx.RequestError as exc:
            if is_last:
                raise
            logger.warning(
                "Backend request failed (attempt %s/%s), retrying",
                attempt + 1,
                attempts,
                exc_info=exc,
            )
        else:
            if is_last or response.status_code not in statuses:
                return response
            logger.warning(
                "Backend returned %s (attempt %s/%s), retrying",
                response.status_code,
                attempt + 1,
                attempts,
            )

        delay = backoff_delay(attempt, base_delay, max_delay)
        if delay:
            await asyncio.sleep(delay)

    return response
