from __future__ import annotations

import io

from rich.console import Console

from verdict.cases import find_case
from verdict.render import Renderer, display_text
from verdict.types import AnalysisResult, DialogueTurn, Judgment, Role, Speaker


def _renderer() -> tuple[Renderer, io.StringIO]:
    buffer = io.StringIO()
    return Renderer(Console(file=buffer, width=200, color_system=None)), buffer


def test_display_text_marks_strong_spans_bold() -> None:
    text = display_text("a &lt;b&gt; <strong>c</strong> d", prefix="검사 : ")

    assert text.plain == "검사 : a <b> c d"
    assert any(span.style == "bold" for span in text.spans)


def test_complete_prints_prefixed_turn() -> None:
    renderer, buffer = _renderer()

    renderer.pending(Role.PROSECUTOR)
    renderer.update(Role.PROSECUTOR, "부분")
    renderer.complete(DialogueTurn(Speaker.AI, Role.PROSECUTOR, "**징역 5년**을 구형합니다 <끝>"))

    assert "검사 : 징역 5년을 구형합니다 <끝>" in buffer.getvalue()


def test_error_is_printed_with_role_prefix() -> None:
    renderer, buffer = _renderer()

    renderer.pending(Role.DEFENDANT)
    renderer.error(Role.DEFENDANT, "오류가 발생했습니다: x")

    assert "피고인 : 오류가 발생했습니다: x" in buffer.getvalue()


def test_analysis_shows_scores_tags_and_comparison() -> None:
    renderer, buffer = _renderer()
    result = AnalysisResult(
        emotion_score=90,
        emotion_reason="감정",
        legal_score=5,
        legal_reason="법리",
        biases=("엄벌 만능주의", "정의감 과잉"),
    )

    renderer.analysis(find_case("jean-valjean"), Judgment(verdict="유죄", sentence="사형", reason="그냥"), result)

    output = buffer.getvalue()
    assert "90%" in output
    assert "#엄벌 만능주의" in output
    assert "유죄 (사형)" in output
    assert "유죄 (선고유예)" in output
