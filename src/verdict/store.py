"""Append-only JSONL store of handed-down verdicts."""

from __future__ import annotations

import json
import math
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from verdict.types import GUILTY, AnalysisResult, Judgment


@dataclass(frozen=True)
class VerdictRecord:
    """One stored judgment together with its analysis."""

    case_id: str
    verdict: str
    sentence: str | None
    reason: str
    emotion_score: int
    legal_score: int
    biases: tuple[str, ...]
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    survey: dict[str, int | None] = field(default_factory=lambda: {"q5": None})

    @classmethod
    def from_analysis(cls, case_id: str, judgment: Judgment, result: AnalysisResult) -> VerdictRecord:
        return cls(
            case_id=case_id,
            verdict=judgment.verdict,
            sentence=judgment.sentence,
            reason=judgment.reason,
            emotion_score=result.emotion_score,
            legal_score=result.legal_score,
            biases=result.biases,
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "caseId": self.case_id,
            "timestamp": self.timestamp,
            "verdict": self.verdict,
            "sentence": self.sentence,
            "reason": self.reason,
            "emotionScore": self.emotion_score,
            "legalScore": self.legal_score,
            "biases": list(self.biases),
            "survey": dict(self.survey),
        }

    @staticmethod
    def from_payload(payload: object) -> VerdictRecord | None:
        if not isinstance(payload, dict):
            return None
        case_id = payload.get("caseId")
        verdict = payload.get("verdict")
        if not isinstance(case_id, str) or not isinstance(verdict, str):
            return None
        sentence = payload.get("sentence")
        biases = payload.get("biases")
        survey = payload.get("survey")
        return VerdictRecord(
            case_id=case_id,
            verdict=verdict,
            sentence=sentence if isinstance(sentence, str) else None,
            reason=str(payload.get("reason", "")),
            emotion_score=_int_or_zero(payload.get("emotionScore")),
            legal_score=_int_or_zero(payload.get("legalScore")),
            biases=tuple(str(tag) for tag in biases) if isinstance(biases, list) else (),
            timestamp=str(payload.get("timestamp", "")),
            survey=dict(survey) if isinstance(survey, dict) else {"q5": None},
        )


@dataclass(frozen=True)
class VerdictStats:
    total: int
    guilty_rate: int
    innocent_rate: int
    sentences: dict[str, int]
    avg_emotion: int
    avg_legal: int


def _int_or_zero(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return int(value)


def _round(value: float) -> int:
    # Half up; every value here is non-negative.
    return int(value + 0.5)


def compute_stats(records: list[VerdictRecord]) -> VerdictStats | None:
    if not records:
        return None
    total = len(records)
    guilty = sum(1 for record in records if record.verdict == GUILTY)
    sentences: dict[str, int] = {}
    for record in records:
        if record.sentence:
            sentences[record.sentence] = sentences.get(record.sentence, 0) + 1
    return VerdictStats(
        total=total,
        guilty_rate=_round(guilty * 100 / total),
        innocent_rate=_round((total - guilty) * 100 / total),
        sentences=sentences,
        avg_emotion=_round(sum(record.emotion_score for record in records) / total),
        avg_legal=_round(sum(record.legal_score for record in records) / total),
    )


class VerdictStore:
    """Best-effort JSONL persistence; write failures are logged, never raised."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

    def read(self) -> list[VerdictRecord]:
        with self._lock:
            return self._read_locked()

    def by_case(self, case_id: str) -> list[VerdictRecord]:
        return [record for record in self.read() if record.case_id == case_id]

    def append(self, record: VerdictRecord) -> bool:
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(json.dumps(record.to_payload(), ensure_ascii=False) + "\n")
            except OSError:
                logger.exception("store.append.error path={}", self.path)
                return False
        return True

    def update_last_survey(self, *, helpful: bool) -> VerdictRecord | None:
        """Record the comparison-survey answer on the most recent verdict."""
        with self._lock:
            records = self._read_locked()
            if not records:
                return None
            updated = replace(records[-1], survey={"q5": 100 if helpful else 0})
            records[-1] = updated
            try:
                self._rewrite_locked(records)
            except OSError:
                logger.exception("store.survey.error path={}", self.path)
                return None
        return updated

    def learning_context(self, case_id: str, *, threshold: int) -> str:
        """Aggregate of earlier verdicts once a case has `threshold` of them."""
        records = self.by_case(case_id)
        if len(records) < threshold:
            return ""
        stats = compute_stats(records)
        if stats is None:
            return ""
        return (
            f"\n[축적된 국민 법감정 데이터 ({stats.total}건)]\n"
            f"- 유죄 비율: {stats.guilty_rate}%, 무죄 비율: {stats.innocent_rate}%\n"
            f"- 평균 감정 개입률: {stats.avg_emotion}%, 평균 법적 합치성: {stats.avg_legal}%\n\n"
            "위 데이터는 이 사건에 대해 다수의 시민(판사)들이 내린 판결 통계입니다.\n"
            "이를 참고하여 분석의 정확도를 높이되, 법리적 원칙에 어긋나지 않도록 하세요.\n"
        )

    def _read_locked(self) -> list[VerdictRecord]:
        if not self.path.exists():
            return []
        records: list[VerdictRecord] = []
        try:
            # Undecodable bytes read as U+FFFD.
            with self.path.open("r", encoding="utf-8", errors="replace") as handle:
                for raw_line in handle:
                    line = raw_line.strip()
                    if not line:
                        continue
                    try:
                        payload = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    record = VerdictRecord.from_payload(payload)
                    if record is not None:
                        records.append(record)
        except OSError:
            logger.exception("store.read.error path={}", self.path)
            return []
        return records

    def _rewrite_locked(self, records: list[VerdictRecord]) -> None:
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            for record in records:
                handle.write(json.dumps(record.to_payload(), ensure_ascii=False) + "\n")
        tmp_path.replace(self.path)
