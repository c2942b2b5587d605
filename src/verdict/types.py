"""Shared domain types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum

from verdict.errors import JudgmentError

type QueueTask = Callable[[], Awaitable[None]]

GUILTY = "유죄"
NOT_GUILTY = "무죄"


class Role(StrEnum):
    """Courtroom identity the model speaks as."""

    PROSECUTOR = "prosecutor"
    DEFENDANT = "defendant"

    @property
    def label(self) -> str:
        return "검사" if self is Role.PROSECUTOR else "피고인"


class Speaker(StrEnum):
    USER = "user"
    AI = "ai"


@dataclass(frozen=True)
class DialogueTurn:
    """One utterance in a role's dialogue history."""

    speaker: Speaker
    role: Role
    text: str


@dataclass(frozen=True)
class RealCase:
    verdict: str
    reason: str
    prosecutor_request: str | None = None


@dataclass(frozen=True)
class AiCase:
    verdict: str
    reason: str


@dataclass(frozen=True)
class CaseFile:
    """Facts of one case presented to the judge."""

    id: str
    title: str
    scenario: str
    law: str
    real_case: RealCase
    ai_case: AiCase

    def context_block(self) -> str:
        return f"사건 제목: {self.title}\n사건 개요: {self.scenario}\n법 조항: {self.law}"


@dataclass(frozen=True)
class Judgment:
    """Verdict handed down by the user."""

    verdict: str
    reason: str
    sentence: str | None = None
    mitigation: bool = False

    def __post_init__(self) -> None:
        if self.verdict not in (GUILTY, NOT_GUILTY):
            raise JudgmentError(f"unknown verdict: {self.verdict!r}")
        if self.verdict == GUILTY and not self.sentence:
            raise JudgmentError("유죄를 선택하신 경우 형량을 지정해주세요.")
        if self.verdict == NOT_GUILTY and self.sentence:
            # A sentence is meaningless for an acquittal.
            object.__setattr__(self, "sentence", None)

    def describe(self) -> str:
        if self.verdict != GUILTY:
            return self.verdict
        text = f"{self.verdict} ({self.sentence})"
        if self.mitigation:
            text += " + 감경 고려"
        return text


@dataclass(frozen=True)
class AnalysisResult:
    """Psychological analysis of one judgment."""

    emotion_score: int
    emotion_reason: str
    legal_score: int
    legal_reason: str
    biases: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RetryNotice:
    """Published while a rate-limited call waits before retrying."""

    attempt: int
    max_retries: int
    delay_seconds: float

    def describe(self) -> str:
        return (
            f"💡 무료 API 한도 초과 방지 대기 중... "
            f"({self.delay_seconds:g}초 후 자동 재시도 {self.attempt}/{self.max_retries})"
        )


SENTENCE_OPTIONS = (
    "사형",
    "무기징역",
    "징역 10년 이상",
    "징역 5년 이상 10년 미만",
    "징역 5년 미만",
    "집행유예",
    "벌금형",
    "선고유예",
)
