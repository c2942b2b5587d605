from __future__ import annotations

import pytest

from verdict.cases import find_case, list_cases
from verdict.errors import CaseNotFoundError


def test_case_ids_are_unique() -> None:
    ids = [case.id for case in list_cases()]
    assert len(ids) == len(set(ids))


def test_find_by_id() -> None:
    assert find_case("drunk-driving-death").title == "음주운전 사망 사고"


def test_find_by_partial_title() -> None:
    assert find_case("장발장").id == "jean-valjean"
    assert find_case("간병 살인").id == "caregiver-mercy-killing"


def test_unknown_case_raises() -> None:
    with pytest.raises(CaseNotFoundError):
        find_case("zzzzzz")


def test_context_block_lists_case_facts() -> None:
    block = find_case("jean-valjean").context_block()
    assert block.startswith("사건 제목: 빵 한 조각을 훔친 장발장 사건\n사건 개요: ")
    assert "법 조항: 형법 제329조(절도)" in block
