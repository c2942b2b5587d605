"""Verdict analysis with a transparent local fallback."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger

from verdict.analysis.base import AnalysisRequest, Analyzer
from verdict.errors import ConfigurationError, InferenceError
from verdict.inference.queue import RequestQueue
from verdict.store import VerdictRecord, VerdictStore
from verdict.types import AnalysisResult, CaseFile, Judgment


@dataclass(frozen=True)
class AnalysisOutcome:
    """Analysis plus the name of the analyzer that produced it."""

    result: AnalysisResult
    source: str


class AnalysisOrchestrator:
    """Runs the primary analyzer through the queue and substitutes the fallback on failure."""

    def __init__(
        self,
        *,
        queue: RequestQueue,
        primary: Analyzer,
        fallback: Analyzer,
        store: VerdictStore,
        learning_threshold: int,
    ) -> None:
        self._queue = queue
        self._primary = primary
        self._fallback = fallback
        self._store = store
        self._learning_threshold = learning_threshold

    async def analyze(self, case: CaseFile, judgment: Judgment) -> AnalysisOutcome:
        future: asyncio.Future[AnalysisOutcome] = asyncio.get_running_loop().create_future()

        async def task() -> None:
            try:
                outcome = await self._run(case, judgment)
            except Exception as exc:
                if not future.done():
                    future.set_exception(exc)
                raise
            if not future.done():
                future.set_result(outcome)

        self._queue.submit(task)
        return await future

    async def _run(self, case: CaseFile, judgment: Judgment) -> AnalysisOutcome:
        request = AnalysisRequest(case=case, judgment=judgment, learning_context=self._learning_context(case))
        try:
            result = await self._primary.analyze(request)
            source = self._primary.name
        except (InferenceError, ConfigurationError) as exc:
            logger.warning("analysis.fallback analyzer={} error={}", self._primary.name, exc)
            result = await self._fallback.analyze(request)
            source = self._fallback.name
        except Exception:
            logger.exception("analysis.fallback analyzer={}", self._primary.name)
            result = await self._fallback.analyze(request)
            source = self._fallback.name

        logger.info(
            "analysis.done source={} emotion={} legal={}", source, result.emotion_score, result.legal_score
        )
        self._store.append(VerdictRecord.from_analysis(case.id, judgment, result))
        return AnalysisOutcome(result=result, source=source)

    def _learning_context(self, case: CaseFile) -> str:
        try:
            return self._store.learning_context(case.id, threshold=self._learning_threshold)
        except Exception:
            logger.exception("analysis.learning_context.error case={}", case.id)
            return ""
