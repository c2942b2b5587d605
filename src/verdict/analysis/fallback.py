"""Heuristic analysis used when the remote analyzer is unavailable."""

from __future__ import annotations

import random

from verdict.analysis.base import AnalysisRequest, clamp
from verdict.types import AnalysisResult

EMOTIONAL_TERMS = (
    "불쌍", "안타", "가엾", "괘씸", "나쁜", "분노", "용서", "화", "어쩔 수 없", "억울", "인간적", "죽여", "처단", "보복",
)  # fmt: skip
LEGAL_TERMS = ("법", "규정", "원칙", "위반", "전과", "누범", "상해", "고의", "증거", "판례", "합당", "비례")
EMPATHY_MARKERS = ("불쌍", "안타")

EXTREME_SENTENCES = frozenset({"사형", "무기징역"})
MINOR_CASE_MARKERS = ("장발장", "빵")
SHORT_REASON_CHARS = 15

PUNITIVE_BIASES = (
    "과잉 처벌 편향", "보복 심리 중심", "엄벌 만능주의", "비례 원칙 간과", "응보적 정의관", "정의감 과잉", "처벌 지상주의",
)  # fmt: skip
INTUITION_BIASES = ("직관 기반 편향", "정서적 이입", "주관적 판단", "감정적 접근")
UNGROUNDED_BIASES = ("법리적 근거 부재", "상식 기반 판단", "논리 비약 가능성")
SYMPATHY_BIASES = ("상황론적 온정주의", "동정심 기반 관대함", "연민에 의한 판단")
GENERIC_BIASES = ("원칙주의적 성향", "객관적 판단 시도", "기계적 법 적용", "상식 기반 판단", "확증 편향 방어")

PUNITIVE_EMOTION_REASON = "범죄의 중대성에 비해 감정적인 보복 심리가 매우 강하게 반영되었습니다."
PUNITIVE_LEGAL_REASON = "죄형법정주의와 비례의 원칙을 크게 벗어난 판결로 분석됩니다."
DEFAULT_EMOTION_REASON = "입력하신 문장에서 주관적인 감정 표현이 감지되었습니다."
DEFAULT_LEGAL_REASON = "법률적 근거보다는 일반적인 상식에 기반한 판단으로 보입니다."


def count_terms(text: str, terms: tuple[str, ...]) -> int:
    return sum(1 for term in terms if term in text)


class FallbackAnalyzer:
    """Keyword heuristics over the written justification."""

    name = "fallback"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        return self.score(
            request.judgment.reason,
            sentence=request.judgment.sentence,
            case_title=request.case.title,
        )

    def score(self, reason: str, *, sentence: str | None, case_title: str) -> AnalysisResult:
        lowered = reason.lower()
        emotion_hits = count_terms(lowered, EMOTIONAL_TERMS)
        legal_hits = count_terms(lowered, LEGAL_TERMS)

        extreme = sentence in EXTREME_SENTENCES
        minor_case = any(marker in case_title for marker in MINOR_CASE_MARKERS)
        too_short = len(reason) < SHORT_REASON_CHARS

        if extreme and (minor_case or too_short):
            return AnalysisResult(
                emotion_score=90,
                emotion_reason=PUNITIVE_EMOTION_REASON,
                legal_score=5,
                legal_reason=PUNITIVE_LEGAL_REASON,
                biases=tuple(self._rng.sample(PUNITIVE_BIASES, 2)),
            )

        emotion_score = clamp(30 + 20 * emotion_hits - 5 * legal_hits, 5, 95)
        legal_score = clamp(70 + 10 * legal_hits - 15 * emotion_hits, 5, 95)

        pool: list[str] = []
        if emotion_hits > 0:
            pool.extend(INTUITION_BIASES)
        if legal_hits == 0 and too_short:
            pool.extend(UNGROUNDED_BIASES)
        if any(marker in reason for marker in EMPATHY_MARKERS):
            pool.extend(SYMPATHY_BIASES)

        biases: list[str] = []
        if pool:
            count = min(len(pool), 2 + self._rng.randrange(2))
            biases = self._rng.sample(pool, count)
        if not biases:
            biases.append(self._rng.choice(GENERIC_BIASES))

        return AnalysisResult(
            emotion_score=emotion_score,
            emotion_reason=DEFAULT_EMOTION_REASON,
            legal_score=legal_score,
            legal_reason=DEFAULT_LEGAL_REASON,
            biases=tuple(biases),
        )
