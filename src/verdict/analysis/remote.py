"""Analysis produced by the remote generation service."""

from __future__ import annotations

import json
import math
from typing import Any

from verdict.analysis.base import SCORE_MAX, SCORE_MIN, AnalysisRequest, clamp
from verdict.errors import MalformedResponseError
from verdict.inference.client import GenerationClient, GenerationRequest
from verdict.prompts import ANALYSIS_USER_TEXT, analysis_prompt
from verdict.types import AnalysisResult

DEFAULT_SCORE = 50
DEFAULT_REASON = "상세 분석을 수행할 수 없습니다."
DEFAULT_BIASES = ("분석 불가",)


def coerce_analysis(payload: Any) -> AnalysisResult:
    """Build an AnalysisResult from a decoded body, defaulting malformed fields."""
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"analysis body is {type(payload).__name__}, expected object")
    return AnalysisResult(
        emotion_score=_score(payload.get("emotionScore")),
        emotion_reason=_reason(payload.get("emotionReason")),
        legal_score=_score(payload.get("legalScore")),
        legal_reason=_reason(payload.get("legalReason")),
        biases=_biases(payload.get("biases")),
    )


def _score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return DEFAULT_SCORE
    if not math.isfinite(value):
        return DEFAULT_SCORE
    return clamp(round(value), SCORE_MIN, SCORE_MAX)


def _reason(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return DEFAULT_REASON


def _biases(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return DEFAULT_BIASES
    tags = tuple(str(item).strip() for item in value if isinstance(item, str | int | float) and str(item).strip())
    return tags or DEFAULT_BIASES


class RemoteAnalyzer:
    """Asks the model for a JSON analysis of the judgment."""

    name = "remote"

    def __init__(self, client: GenerationClient, *, temperature: float = 0.7) -> None:
        self._client = client
        self._temperature = temperature

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        generation = GenerationRequest(
            system_prompt=analysis_prompt(request.case, request.judgment, request.learning_context),
            user_text=ANALYSIS_USER_TEXT,
            temperature=self._temperature,
            json_response=True,
            label="analysis",
        )
        text = await self._client.generate(generation)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(f"analysis is not JSON: {exc!s}") from exc
        return coerce_analysis(payload)
