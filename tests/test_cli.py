from __future__ import annotations

import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from verdict.store import VerdictStore

cli_module = importlib.import_module("verdict.cli")


@pytest.fixture
def offline_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VERDICT_API_KEY", raising=False)
    monkeypatch.setenv("VERDICT_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("VERDICT_QUEUE_COOLDOWN_SECONDS", "0")
    return tmp_path / "home" / "verdicts.jsonl"


def test_cases_lists_catalog() -> None:
    result = CliRunner().invoke(cli_module.app, ["cases"])

    assert result.exit_code == 0
    assert "jean-valjean" in result.output


def test_analyze_without_api_key_uses_fallback_and_stores(offline_env: Path) -> None:
    result = CliRunner().invoke(
        cli_module.app,
        ["analyze", "장발장", "--verdict", "유죄", "--sentence", "사형", "--reason", "그냥 사형"],
    )

    assert result.exit_code == 0, result.output
    assert "90%" in result.output
    [record] = VerdictStore(offline_env).read()
    assert record.case_id == "jean-valjean"
    assert (record.emotion_score, record.legal_score) == (90, 5)


def test_analyze_rejects_guilty_without_sentence(offline_env: Path) -> None:
    result = CliRunner().invoke(cli_module.app, ["analyze", "jean-valjean", "--verdict", "유죄", "--reason", "r"])

    assert result.exit_code == 1
    assert not offline_env.exists()


def test_unknown_case_exits_with_error(offline_env: Path) -> None:
    result = CliRunner().invoke(cli_module.app, ["stats", "zzzzzz"])

    assert result.exit_code == 1
    assert "unknown case" in result.output


def test_stats_reports_stored_verdicts(offline_env: Path) -> None:
    runner = CliRunner()
    runner.invoke(
        cli_module.app,
        ["analyze", "jean-valjean", "--verdict", "무죄", "--reason", "생계형 범죄로 처벌의 필요성이 낮습니다"],
    )

    result = runner.invoke(cli_module.app, ["stats", "jean-valjean"])

    assert result.exit_code == 0
    assert "(1건)" in result.output
    assert "무죄 100%" in result.output


def test_trial_without_api_key_still_reaches_judgment(offline_env: Path) -> None:
    result = CliRunner().invoke(
        cli_module.app,
        ["trial", "jean-valjean"],
        input="hello\n/judge\n무죄\n증거가 부족합니다\ny\n",
    )

    assert result.exit_code == 0, result.output
    assert "API 키 설정이 되어있지 않습니다." in result.output
    [record] = VerdictStore(offline_env).read()
    assert record.verdict == "무죄"
    assert record.survey == {"q5": 100}
