"""Single-flight request queue with a cooldown between tasks."""

from __future__ import annotations

import asyncio
from collections import deque

from loguru import logger

from verdict.inference.backoff import Sleep
from verdict.types import QueueTask

DEFAULT_COOLDOWN_SECONDS = 1.0


class RequestQueue:
    """Runs queued inference tasks one at a time, in submission order."""

    def __init__(self, *, cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS, sleep: Sleep = asyncio.sleep) -> None:
        self._cooldown_seconds = cooldown_seconds
        self._sleep = sleep
        self._pending: deque[QueueTask] = deque()
        self._busy = False
        self._cooling = False
        self._scheduled: set[asyncio.Task[None]] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def pending(self) -> int:
        return len(self._pending)

    def enqueue(self, task: QueueTask) -> None:
        self._pending.append(task)
        self._idle.clear()

    def submit(self, task: QueueTask) -> None:
        """Enqueue a task and start draining on the running loop."""
        self.enqueue(task)
        self._spawn(self.drain())

    async def drain(self) -> None:
        if self._busy or self._cooling or not self._pending:
            self._refresh_idle()
            return

        task = self._pending.popleft()
        self._busy = True
        try:
            await task()
        except Exception:
            logger.exception("queue.task.error")
        finally:
            self._busy = False
            if self._pending:
                self._cooling = True
                self._spawn(self._drain_after_cooldown())
            self._refresh_idle()

    async def join(self) -> None:
        """Wait until nothing is pending, running, or waiting out a cooldown."""
        await self._idle.wait()

    async def _drain_after_cooldown(self) -> None:
        try:
            await self._sleep(self._cooldown_seconds)
        finally:
            self._cooling = False
        await self.drain()

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._scheduled.add(task)
        task.add_done_callback(self._on_scheduled_done)
        self._idle.clear()

    def _on_scheduled_done(self, task: asyncio.Task[None]) -> None:
        self._scheduled.discard(task)
        self._refresh_idle()

    def _refresh_idle(self) -> None:
        if self._busy or self._cooling or self._pending or self._scheduled:
            return
        self._idle.set()
