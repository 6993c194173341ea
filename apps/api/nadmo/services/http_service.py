"""Retry/backoff for collaborator API calls.

Only requests that are safe to repeat are retried. A POST that timed out or
got a 502 may already have been committed upstream, so it is sent once.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any

import httpx

from nadmo.core.config import settings
from nadmo.core.structured_logging import build_log_context

logger = logging.getLogger(__name__)

DEFAULT_RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff with jitter, capped at ``max_delay`` seconds."""

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 4.0
    retry_statuses: frozenset[int] = field(default=DEFAULT_RETRY_STATUSES)

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        return cls(
            max_attempts=settings.API_MAX_ATTEMPTS,
            base_delay=settings.API_RETRY_BASE_DELAY,
            max_delay=settings.API_RETRY_MAX_DELAY,
        )

    def delay_for(self, attempt: int) -> float:
        delay = min(self.max_delay, self.base_delay * (2**attempt))
        if delay:
            delay += random.uniform(0, delay / 2)
        return delay


def is_idempotent(method: str) -> bool:
    return method.upper() in IDEMPOTENT_METHODS


async def send_with_retries(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    retry: bool | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """
    Send ``method url`` through ``client``, retrying transient failures.

    ``retry`` defaults to whether the method is idempotent; callers pass
    ``retry=True`` for PATCHes that set absolute values.

    Raises:
        httpx.RequestError: transport failure on the last (or only) attempt
    """
    policy = policy or RetryPolicy.from_settings()
    if retry is None:
        retry = is_idempotent(method)
    attempts = max(1, policy.max_attempts) if retry else 1
    context = build_log_context(route=url, method=method.upper())

    for attempt in range(attempts):
        last_attempt = attempt >= attempts - 1
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            if last_attempt:
                raise
            logger.warning("Collaborator API request failed, retrying", exc_info=exc, extra=context)
        else:
            if last_attempt or response.status_code not in policy.retry_statuses:
                return response
            logger.warning(
                "Collaborator API returned %s, retrying", response.status_code, extra=context
            )

        delay = policy.delay_for(attempt)
        if delay:
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")  # pragma: no cover
