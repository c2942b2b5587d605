"""Application runtime wiring."""

from __future__ import annotations

import asyncio
import random

import httpx

from verdict.analysis import AnalysisOrchestrator, FallbackAnalyzer, RemoteAnalyzer
from verdict.config import Settings
from verdict.dialogue import DialogueOrchestrator
from verdict.inference import BackoffController, BackoffPolicy, GenerationClient, RequestQueue
from verdict.inference.backoff import Sleep
from verdict.render import DialogueSink
from verdict.session import CourtSession
from verdict.store import VerdictStore


class CourtRuntime:
    """One trial's collaborators, sharing a single request queue."""

    def __init__(
        self,
        settings: Settings,
        *,
        sink: DialogueSink,
        http: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.session = CourtSession()
        self.store = VerdictStore(settings.store_path)
        policy = BackoffPolicy.from_schedule(settings.backoff_schedule)
        backoff = BackoffController(policy, sleep=sleep)
        self.queue = RequestQueue(cooldown_seconds=settings.queue_cooldown_seconds, sleep=sleep)
        self.client = GenerationClient(settings, http=http, backoff=backoff)
        self.dialogue = DialogueOrchestrator(
            settings=settings,
            session=self.session,
            client=self.client,
            queue=self.queue,
            sink=sink,
        )
        self.analysis = AnalysisOrchestrator(
            queue=self.queue,
            primary=RemoteAnalyzer(self.client, temperature=settings.temperature),
            fallback=FallbackAnalyzer(rng),
            store=self.store,
            learning_threshold=settings.learning_threshold,
        )

    async def __aenter__(self) -> CourtRuntime:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.queue.join()
        await self.client.aclose()
