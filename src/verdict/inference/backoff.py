"""Retry policy for rate-limited inference calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from verdict.types import RetryNotice

RATE_LIMITED_STATUS = 429
DEFAULT_SCHEDULE: tuple[float, ...] = (5.0, 10.0, 15.0)

type Sleep = Callable[[float], Awaitable[object]]
type RetryCallback = Callable[[RetryNotice], None]


@dataclass(frozen=True)
class BackoffPolicy:
    """Fixed backoff schedule; one delay per retry index."""

    schedule: tuple[float, ...] = DEFAULT_SCHEDULE
    rate_limited_status: int = RATE_LIMITED_STATUS

    @classmethod
    def from_schedule(cls, schedule: Sequence[float]) -> BackoffPolicy:
        return cls(schedule=tuple(float(delay) for delay in schedule))

    @property
    def max_retries(self) -> int:
        return len(self.schedule)

    def is_rate_limited(self, status_code: int) -> bool:
        return status_code == self.rate_limited_status

    def delay_for(self, attempt: int) -> float:
        return self.schedule[attempt]


@dataclass
class RetryState:
    """Attempt counter for one call."""

    policy: BackoffPolicy
    attempt: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.policy.max_retries


class BackoffController:
    """Decides whether a failed attempt is retried and waits out the delay."""

    def __init__(self, policy: BackoffPolicy | None = None, *, sleep: Sleep = asyncio.sleep) -> None:
        self._policy = policy or BackoffPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> BackoffPolicy:
        return self._policy

    def start(self) -> RetryState:
        return RetryState(self._policy)

    async def wait_if_retryable(
        self,
        state: RetryState,
        status_code: int,
        *,
        on_retry: RetryCallback | None = None,
        label: str = "-",
    ) -> bool:
        """Wait and advance the attempt counter if the status may be retried.

        Returns False when the caller must stop and treat the outcome as terminal.
        """
        if state.exhausted or not self._policy.is_rate_limited(status_code):
            return False

        delay = self._policy.delay_for(state.attempt)
        notice = RetryNotice(
            attempt=state.attempt + 1,
            max_retries=self._policy.max_retries,
            delay_seconds=delay,
        )
        logger.warning(
            "inference.retry label={} status={} attempt={}/{} delay={}s",
            label,
            status_code,
            notice.attempt,
            notice.max_retries,
            delay,
        )
        if on_retry is not None:
            on_retry(notice)
        await self._sleep(delay)
        state.attempt += 1
        return True
