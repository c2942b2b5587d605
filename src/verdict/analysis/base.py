"""Analyzer capability shared by the remote and local producers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from verdict.types import AnalysisResult, CaseFile, Judgment

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class AnalysisRequest:
    case: CaseFile
    judgment: Judgment
    learning_context: str = ""


class Analyzer(Protocol):
    """Produces an AnalysisResult for one judgment."""

    name: str

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult: ...


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
