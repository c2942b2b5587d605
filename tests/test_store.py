from __future__ import annotations

from pathlib import Path

from verdict.store import VerdictRecord, VerdictStore, compute_stats
from verdict.types import AnalysisResult, Judgment


def _record(case_id: str, verdict: str, sentence: str | None, emotion: int, legal: int) -> VerdictRecord:
    judgment = Judgment(verdict=verdict, sentence=sentence, reason="이유")
    result = AnalysisResult(
        emotion_score=emotion,
        emotion_reason="e",
        legal_score=legal,
        legal_reason="l",
        biases=("태그",),
    )
    return VerdictRecord.from_analysis(case_id, judgment, result)


def test_append_and_filter_by_case(tmp_path: Path) -> None:
    store = VerdictStore(tmp_path / "nested" / "verdicts.jsonl")

    assert store.read() == []
    assert store.append(_record("a", "유죄", "사형", 90, 5))
    assert store.append(_record("b", "무죄", None, 10, 90))

    assert [record.case_id for record in store.read()] == ["a", "b"]
    [record] = store.by_case("b")
    assert record.verdict == "무죄"
    assert record.sentence is None
    assert record.survey == {"q5": None}


def test_payload_uses_camel_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "verdicts.jsonl"
    store = VerdictStore(path)
    store.append(_record("a", "유죄", "벌금형", 30, 70))

    line = path.read_text(encoding="utf-8").strip()
    assert '"caseId": "a"' in line
    assert '"emotionScore": 30' in line
    assert '"sentence": "벌금형"' in line


def test_corrupt_lines_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "verdicts.jsonl"
    path.write_text('not json\n{"caseId": 3}\n\n{"caseId": "a", "verdict": "무죄"}\n', encoding="utf-8")

    [record] = VerdictStore(path).read()
    assert record.case_id == "a"
    assert record.emotion_score == 0
    assert record.biases == ()


def test_update_last_survey_rewrites_only_latest(tmp_path: Path) -> None:
    store = VerdictStore(tmp_path / "verdicts.jsonl")
    assert store.update_last_survey(helpful=True) is None

    store.append(_record("a", "유죄", "사형", 90, 5))
    store.append(_record("a", "무죄", None, 10, 90))
    updated = store.update_last_survey(helpful=True)

    assert updated is not None
    assert [record.survey for record in store.read()] == [{"q5": None}, {"q5": 100}]
    store.update_last_survey(helpful=False)
    assert store.read()[-1].survey == {"q5": 0}


def test_append_failure_is_reported_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = VerdictStore(blocker / "verdicts.jsonl")

    assert store.append(_record("a", "유죄", "사형", 90, 5)) is False


def test_compute_stats() -> None:
    assert compute_stats([]) is None

    stats = compute_stats([
        _record("a", "유죄", "사형", 90, 5),
        _record("a", "유죄", "사형", 80, 10),
        _record("a", "무죄", None, 11, 90),
    ])

    assert stats is not None
    assert stats.total == 3
    assert stats.guilty_rate == 67
    assert stats.innocent_rate == 33
    assert stats.sentences == {"사형": 2}
    assert stats.avg_emotion == 60
    assert stats.avg_legal == 35


def test_learning_context_respects_threshold(tmp_path: Path) -> None:
    store = VerdictStore(tmp_path / "verdicts.jsonl")
    store.append(_record("a", "유죄", "사형", 90, 5))
    store.append(_record("a", "무죄", None, 10, 95))

    assert store.learning_context("a", threshold=3) == ""
    context = store.learning_context("a", threshold=2)
    assert "(2건)" in context
    assert "유죄 비율: 50%, 무죄 비율: 50%" in context
    assert "평균 감정 개입률: 50%, 평균 법적 합치성: 50%" in context


def test_damaged_lines_are_read_without_raising(tmp_path: Path) -> None:
    path = tmp_path / "verdicts.jsonl"
    path.write_bytes(
        b'{"caseId":"jean-valjean","verdict":"\xff"}\n'
        + '{"caseId":"jean-valjean","verdict":"유죄","emotionScore":NaN,"legalScore":Infinity}\n'.encode()
        + b"not json\n"
    )
    store = VerdictStore(path)

    first, second = store.by_case("jean-valjean")

    assert first.verdict == "\ufffd"
    assert (second.emotion_score, second.legal_score) == (0, 0)
    assert "(2건)" in store.learning_context("jean-valjean", threshold=2)
