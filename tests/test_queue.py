from __future__ import annotations

import asyncio

import pytest

from verdict.inference.queue import RequestQueue


class EventLog:
    def __init__(self) -> None:
        self.events: list[str] = []

    async def sleep(self, delay: float) -> None:
        self.events.append(f"sleep:{delay}")
        await asyncio.sleep(0)


def _task(log: EventLog, name: str, *, fail: bool = False):
    async def run() -> None:
        log.events.append(f"{name}:start")
        await asyncio.sleep(0)
        log.events.append(f"{name}:end")
        if fail:
            raise RuntimeError(f"{name} failed")

    return run


@pytest.mark.asyncio
async def test_tasks_run_once_in_fifo_order_without_overlap() -> None:
    log = EventLog()
    queue = RequestQueue(cooldown_seconds=1.0, sleep=log.sleep)

    for name in ("a", "b", "c", "d"):
        queue.submit(_task(log, name))
    await queue.join()

    runs = [event for event in log.events if not event.startswith("sleep")]
    assert runs == ["a:start", "a:end", "b:start", "b:end", "c:start", "c:end", "d:start", "d:end"]
    assert queue.pending == 0
    assert queue.busy is False


@pytest.mark.asyncio
async def test_second_task_waits_for_cooldown_after_first() -> None:
    log = EventLog()
    queue = RequestQueue(cooldown_seconds=1.0, sleep=log.sleep)

    queue.enqueue(_task(log, "a"))
    queue.enqueue(_task(log, "b"))
    await queue.drain()
    await queue.join()

    assert log.events == ["a:start", "a:end", "sleep:1.0", "b:start", "b:end"]


@pytest.mark.asyncio
async def test_failing_task_does_not_stop_the_queue() -> None:
    log = EventLog()
    queue = RequestQueue(cooldown_seconds=0.5, sleep=log.sleep)

    queue.submit(_task(log, "a", fail=True))
    queue.submit(_task(log, "b"))
    await queue.join()

    assert log.events == ["a:start", "a:end", "sleep:0.5", "b:start", "b:end"]


@pytest.mark.asyncio
async def test_drain_is_noop_while_busy_or_empty() -> None:
    log = EventLog()
    queue = RequestQueue(cooldown_seconds=1.0, sleep=log.sleep)
    await queue.drain()
    assert log.events == []

    release = asyncio.Event()
    observed: list[bool] = []

    async def blocking() -> None:
        observed.append(queue.busy)
        await release.wait()

    queue.submit(blocking)
    queue.submit(_task(log, "b"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    await queue.drain()
    assert queue.busy is True
    assert queue.pending == 1
    assert "b:start" not in log.events

    release.set()
    await queue.join()
    assert observed == [True]
    assert log.events == ["sleep:1.0", "b:start", "b:end"]


@pytest.mark.asyncio
async def test_submit_during_cooldown_does_not_skip_it() -> None:
    log = EventLog()
    gate = asyncio.Event()

    async def gated_sleep(delay: float) -> None:
        log.events.append(f"sleep:{delay}")
        await gate.wait()

    queue = RequestQueue(cooldown_seconds=1.0, sleep=gated_sleep)
    queue.submit(_task(log, "a"))
    queue.submit(_task(log, "b"))
    for _ in range(5):
        await asyncio.sleep(0)
    assert log.events == ["a:start", "a:end", "sleep:1.0"]

    queue.submit(_task(log, "c"))
    for _ in range(5):
        await asyncio.sleep(0)
    assert "b:start" not in log.events
    assert "c:start" not in log.events

    gate.set()
    await queue.join()
    runs = [event for event in log.events if not event.startswith("sleep")]
    assert runs == ["a:start", "a:end", "b:start", "b:end", "c:start", "c:end"]
