"""Prompt builders for the courtroom roles and the verdict analysis."""

from __future__ import annotations

from collections.abc import Sequence

from verdict.types import CaseFile, DialogueTurn, Judgment, Role, Speaker

DEFAULT_PROSECUTOR_REQUEST = "법에 따른 엄벌"
OPENING_USER_TEXT = "재판을 시작하며 첫 진술을 해주세요."
ANALYSIS_USER_TEXT = "사용자 판결에 대한 실시간 MLOps 데이터 분석을 수행하십시오."
JUDGE_LABEL = "사용자(판사)"

_NO_ASSISTANT_TONE = (
    '절대 "질문해 주십시오", "무엇이든 물어보세요" 등의 인공지능 같은 도우미 멘트를 붙이지 마십시오. '
    "질문에 대답하는 것이 아니라 당신이 먼저 발언하는 상황입니다."
)


def prosecutor_request(case: CaseFile) -> str:
    return case.real_case.prosecutor_request or DEFAULT_PROSECUTOR_REQUEST


def opening_prompt(case: CaseFile, role: Role) -> str:
    if role is Role.PROSECUTOR:
        return (
            f"당신은 다음 사건의 엄정한 '검사(Prosecutor)' 역할을 맡았습니다.\n{case.context_block()}\n\n"
            "당신은 지금 실제 형사 재판정에서 판사를 향해 **기소 요지(범죄 사실, 죄질의 중대성)를 엄숙히 낭독하고 "
            "구형(어떠한 처벌을 내려달라)**하는 첫 발언을 시작해야 합니다.\n"
            f"{_NO_ASSISTANT_TONE}\n"
            '"존경하는 재판장님," 으로 시작하여 사건의 악랄함이나 처벌의 필요성을 강조하고, 최종적으로 실감나는 '
            "검사의 기소 진술(약 3~4문장 1문단)만을 즉시 작성하십시오.\n"
            "핵심 지시사항: 당신이 마지막에 구형해야 할 형량은 실제 역사적 기록에 따라 "
            f"**반드시 '{prosecutor_request(case)}'**이어야 합니다. 다른 형량을 추론해서는 안 되며, "
            "이 구형량 부분을 반드시 **마크다운 굵게 처리**하여 강조하십시오."
        )
    return (
        f"당신은 다음 사건의 '피고인(Defendant)' 역할을 맡았습니다.\n{case.context_block()}\n\n"
        "당신은 지금 실제 형사 재판정에서 판사를 향해 **최후 변론 또는 첫 모두 진술**을 하는 상황입니다.\n"
        f"{_NO_ASSISTANT_TONE}\n"
        '"재판장님," 으로 시작하여 자신의 억울함, 어쩔 수 없었던 정황, 혹은 뼈저린 반성 등을 표현하며 선처를 '
        "호소하거나 무죄를 강변하는 실감나는 피고인의 진술(약 3~4문장 1문단)만을 즉시 작성하십시오.\n"
        "중요: 본인의 억울한 점이나 가장 선처를 받아야 하는 핵심 항변 사유, 그리고 최종적으로 원하는 바"
        "(선처 호소, 무죄 주장 등)는 반드시 **마크다운 굵게 처리**하여 강조하십시오."
    )


def render_history(turns: Sequence[DialogueTurn]) -> str:
    return "\n".join(
        f"{JUDGE_LABEL if turn.speaker is Speaker.USER else turn.role.label}: {turn.text}" for turn in turns
    )


def reply_prompt(case: CaseFile, role: Role, history: Sequence[DialogueTurn], question: str) -> str:
    """Instruction for answering the judge; `history` excludes the question itself."""
    label = role.label
    extra_rules = ""
    if role is Role.PROSECUTOR:
        extra_rules = (
            f"\n당신이 이 재판에서 구형하는 형벌은 실제 역사적 기록에 따라 **반드시 '{prosecutor_request(case)}'**"
            "이어야 합니다. 판사가 형량을 묻거나 답변 중 형량을 언급할 때는 반드시 이 구형량을 고수하십시오."
        )
    return (
        f"당신은 다음 사건의 '{label}' 역할을 맡았습니다.\n{case.context_block()}{extra_rules}\n\n"
        f"사용자는 이 사건을 판결하는 판사입니다. 당신은 '{label}'의 입장에서 진행 중인 재판정에서 판사의 심문에 "
        "답변하는 중입니다.\n"
        "'존경하는 재판장님'과 같은 상투적인 인사말만 남기고 답변을 끊거나, \"무엇이든 질문해 주십시오\" 같은 "
        "안내원 태도를 취하지 마십시오. 판사의 질문이나 지적에 대해 당신의 입장(검사는 엄벌/기소 유지 우려 표명, "
        "피고인은 변호/선처/무죄 호소)을 강변하며 실질적인 대답을 하십시오. 사람처럼 연기하십시오.\n"
        "중요: 문맥상 가장 중요한 당신의 주장, 논거, 구형량, 혹은 호소하는 바는 반드시 "
        "**마크다운 굵게 처리**하여 강조하십시오.\n\n"
        f"이전 대화:\n{render_history(history)}\n\n"
        f"판사의 질문: {question}\n\n"
        f"{label}의 대답:"
    )


def analysis_prompt(case: CaseFile, judgment: Judgment, learning_context: str = "") -> str:
    sentence = f" ({judgment.sentence})" if judgment.sentence else ""
    return (
        "당신은 판사가 제출한 판결문과 그 기저에 깔린 심리를 분석하는 고도의 법률 심리 분석 AI입니다.\n"
        f"{learning_context}\n"
        "[분석 지침]\n"
        "1. emotionScore (0~100): 판단에 개입된 동정, 분노, 보복심 등 감정적 동기의 비율입니다. 법리보다 직관이나 "
        '감정에 치우친 표현(예: "그냥 사형", "나쁘니까")이 많을수록 높은 점수를 부여하세요.\n'
        "2. legalScore (0~100): 제출된 판결 이유가 제공된 법 조항 및 비례의 원칙과 얼마나 부합하는지 나타냅니다. "
        "구체적 법리 근거 없이 극단적 형량을 부과한 경우 매우 낮은 점수를 부여하세요.\n"
        "3. emotionReason & legalReason: 각각의 점수를 부여한 구체적인 근거를 한국어로 설명하세요.\n"
        "4. biases: 판결에서 엿보이는 편향성 키워드 2개를 추출하세요.\n\n"
        f"[사건 정보]\n제목: {case.title}\n개요: {case.scenario}\n관련 법: {case.law}\n\n"
        f"[사용자의 판결]\n판결: {judgment.verdict}{sentence}\n판결 이유: \"{judgment.reason}\"\n\n"
        "*반드시* 아래 JSON 형식으로만 응답하세요:\n"
        "{\n"
        '  "emotionScore": [숫자],\n'
        '  "emotionReason": "[설명]",\n'
        '  "legalScore": [숫자],\n'
        '  "legalReason": "[설명]",\n'
        '  "biases": ["키워드1", "키워드2"]\n'
        "}"
    )
