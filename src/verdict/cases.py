"""Built-in case catalog."""

from __future__ import annotations

from rapidfuzz import fuzz, process

from verdict.errors import CaseNotFoundError
from verdict.types import AiCase, CaseFile, RealCase

MIN_TITLE_SCORE = 60

CASES: tuple[CaseFile, ...] = (
    CaseFile(
        id="jean-valjean",
        title="빵 한 조각을 훔친 장발장 사건",
        scenario=(
            "실직 상태의 피고인은 굶주린 조카들을 먹이기 위해 새벽에 빵집 유리창을 깨고 빵 한 덩이를 훔쳤다. "
            "피고인은 현장에서 체포되었으며 과거 동종 전과는 없다."
        ),
        law="형법 제329조(절도), 제366조(재물손괴)",
        real_case=RealCase(
            verdict="유죄 (징역 5년)",
            reason="당시 법원은 사유재산 보호를 이유로 중형을 선고했으나, 이후 과잉 처벌의 대표 사례로 비판받았다.",
            prosecutor_request="징역 5년",
        ),
        ai_case=AiCase(
            verdict="유죄 (선고유예)",
            reason="범행 동기와 피해 규모, 초범인 점을 고려하면 형의 선고를 유예하는 것이 비례의 원칙에 부합한다.",
        ),
    ),
    CaseFile(
        id="drunk-driving-death",
        title="음주운전 사망 사고",
        scenario=(
            "혈중알코올농도 0.18% 상태로 차량을 운전하던 피고인은 횡단보도를 건너던 보행자를 치어 숨지게 했다. "
            "피고인은 2회의 음주운전 전과가 있다."
        ),
        law="특정범죄 가중처벌 등에 관한 법률 제5조의11(위험운전치사)",
        real_case=RealCase(
            verdict="유죄 (징역 8년)",
            reason="음주운전 누범이며 피해가 회복될 수 없다는 점을 들어 중형을 선고했다.",
            prosecutor_request="징역 10년",
        ),
        ai_case=AiCase(
            verdict="유죄 (징역 8년)",
            reason="누범 가중과 결과의 중대성을 고려하되 피고인의 반성과 유족 합의 시도를 일부 참작했다.",
        ),
    ),
    CaseFile(
        id="caregiver-mercy-killing",
        title="간병 살인 사건",
        scenario=(
            "10년간 중증 치매를 앓는 어머니를 홀로 간병해 온 피고인은 극심한 생활고와 우울증 끝에 어머니를 "
            "살해하고 자수했다."
        ),
        law="형법 제250조 제2항(존속살해)",
        real_case=RealCase(
            verdict="유죄 (징역 4년)",
            reason="존속살해의 법정형은 무겁지만 장기간의 간병 부담과 자수를 고려해 작량감경했다.",
            prosecutor_request="징역 7년",
        ),
        ai_case=AiCase(
            verdict="유죄 (징역 3년, 집행유예 5년)",
            reason="사회적 돌봄 체계의 공백과 피고인의 심신 상태를 고려해 집행유예가 타당하다고 보았다.",
        ),
    ),
)


def list_cases() -> tuple[CaseFile, ...]:
    return CASES


def find_case(query: str, cases: tuple[CaseFile, ...] = CASES) -> CaseFile:
    """Resolve a case by exact id, or by the closest title."""
    normalized = query.strip()
    for case in cases:
        if case.id == normalized:
            return case

    titles = {case.id: case.title for case in cases}
    match = process.extractOne(normalized, titles, scorer=fuzz.WRatio, score_cutoff=MIN_TITLE_SCORE)
    if match is None:
        raise CaseNotFoundError(f"unknown case: {query}")
    _, _, case_id = match
    return next(case for case in cases if case.id == case_id)
