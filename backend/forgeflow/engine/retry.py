# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Retry Policy

Bounded retry with exponential backoff around calls to external services.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from .exceptions import NodeExecutionError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    max_retries: extra attempts after the first one (0 = no retry)
    backoff: delay before the first retry, doubled on each further retry
    backoff_max: upper bound for a single delay
    """
    max_retries: int = 0
    backoff: float = 1.0
    backoff_max: float = 30.0

    def with_retries(self, retries: Optional[int]) -> "RetryPolicy":
        """Policy with a per-node override applied"""
        if retries is None:
            return self
        return replace(self, max_retries=retries)

    def delay_for(self, attempt: int) -> float:
        """Delay after failed attempt number `attempt` (0-based)"""
        return min(self.backoff * (2 ** attempt), self.backoff_max)


def is_retryable(error: BaseException) -> bool:
    if isinstance(error, NodeExecutionError):
        return error.retryable
    return isinstance(error, httpx.TransportError)


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """
    Await func(), retrying retryable failures up to policy.max_retries times.

    The last error is re-raised once attempts are exhausted; non-retryable
    errors are raised immediately.
    """
    attempt = 0
    while True:
        try:
            return await func()
        except Exception as e:
            if attempt >= policy.max_retries or not is_retryable(e):
                raise
            if on_retry:
                on_retry(attempt + 1, e)
            await asyncio.sleep(policy.delay_for(attempt))
            attempt += 1
