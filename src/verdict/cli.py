"""Command line interface for verdict."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Annotated

import typer
from loguru import logger
from rich.prompt import Confirm, Prompt

from verdict.app import CourtRuntime
from verdict.cases import find_case, list_cases
from verdict.config import Settings, load_settings
from verdict.errors import CaseNotFoundError, JudgmentError
from verdict.logging_utils import configure_logging
from verdict.render import Renderer
from verdict.store import VerdictStore, compute_stats
from verdict.types import GUILTY, NOT_GUILTY, SENTENCE_OPTIONS, CaseFile, Judgment, Role

PROGRESS_MESSAGES = (
    "법적 합치성을 검토 중입니다...",
    "판단에 개입된 감정적 요소를 추출 중입니다...",
    "인지적·도덕적 편향성을 분석 중입니다...",
    "실제 판례 및 AI 모델의 판결과 비교 중입니다...",
)
PROGRESS_INTERVAL_SECONDS = 1.5
ROLE_SHORTCUTS = {"p": Role.PROSECUTOR, "d": Role.DEFENDANT}
TRIAL_HELP = "[dim]p <질문>: 검사에게 · d <질문>: 피고인에게 · /judge: 판결 · /quit: 종료[/dim]"

app = typer.Typer(
    name="verdict",
    help="Sit as the judge, question both sides, and see how your verdict reads.",
    add_completion=False,
    rich_markup_mode="rich",
)

CaseArg = Annotated[str, typer.Argument(help="Case id or (part of) its title")]
ApiKeyOpt = Annotated[str | None, typer.Option("--api-key", help="Overrides VERDICT_API_KEY")]


def _settings(api_key: str | None = None) -> Settings:
    settings = load_settings(api_key=api_key)
    configure_logging(profile="chat", level=settings.log_level)
    return settings


def _resolve_case(query: str, renderer: Renderer) -> CaseFile:
    try:
        return find_case(query)
    except CaseNotFoundError as e:
        renderer.error_message(str(e))
        raise typer.Exit(1) from e


@app.command("cases")
def cases_command() -> None:
    """List the available cases."""
    Renderer().cases(list_cases())


@app.command("trial")
def trial_command(case: CaseArg, api_key: ApiKeyOpt = None) -> None:
    """Question the prosecutor and the defendant, then hand down a verdict."""
    renderer = Renderer()
    settings = _settings(api_key)
    case_file = _resolve_case(case, renderer)
    asyncio.run(_run_trial(settings, case_file, renderer))


@app.command("analyze")
def analyze_command(
    case: CaseArg,
    verdict: Annotated[str, typer.Option("--verdict", help=f"{GUILTY} or {NOT_GUILTY}")],
    reason: Annotated[str, typer.Option("--reason", help="Written justification")],
    sentence: Annotated[str | None, typer.Option("--sentence", help="Sentence for a guilty verdict")] = None,
    mitigation: Annotated[bool, typer.Option("--mitigation", help="Mitigating circumstances considered")] = False,
    api_key: ApiKeyOpt = None,
) -> None:
    """Analyze a verdict without holding the dialogue."""
    renderer = Renderer()
    settings = _settings(api_key)
    case_file = _resolve_case(case, renderer)
    try:
        judgment = Judgment(verdict=verdict, reason=reason, sentence=sentence, mitigation=mitigation)
    except JudgmentError as e:
        renderer.error_message(str(e))
        raise typer.Exit(1) from e
    asyncio.run(_run_analysis_only(settings, case_file, judgment, renderer))


@app.command("stats")
def stats_command(case: CaseArg) -> None:
    """Show statistics of stored verdicts for a case."""
    renderer = Renderer()
    settings = _settings()
    case_file = _resolve_case(case, renderer)
    stats = compute_stats(VerdictStore(settings.store_path).by_case(case_file.id))
    if stats is None:
        renderer.info(f"[dim]{case_file.title}: 저장된 판결이 없습니다.[/dim]")
        return
    renderer.info(
        f"[bold]{case_file.title}[/bold] ({stats.total}건)\n"
        f"유죄 {stats.guilty_rate}% · 무죄 {stats.innocent_rate}%\n"
        f"평균 감정 개입률 {stats.avg_emotion}% · 평균 법적 합치성 {stats.avg_legal}%"
    )
    for sentence, count in sorted(stats.sentences.items(), key=lambda item: -item[1]):
        renderer.info(f"  {sentence}: {count}")


async def _run_trial(settings: Settings, case: CaseFile, renderer: Renderer) -> None:
    async with CourtRuntime(settings, sink=renderer) as runtime:
        runtime.session.select_case(case)
        renderer.scenario(case)
        runtime.dialogue.open()
        await runtime.queue.join()

        renderer.info(TRIAL_HELP)
        while True:
            # Prompt.ask blocks the loop; the queue is joined before each prompt so nothing is in flight.
            line = Prompt.ask("[bold cyan]판사[/bold cyan]", console=renderer.console).strip()
            if line == "/quit":
                return
            if line == "/judge":
                break
            shortcut, _, question = line.partition(" ")
            role = ROLE_SHORTCUTS.get(shortcut.lower())
            if role is None or not question.strip():
                renderer.info(TRIAL_HELP)
                continue
            renderer.user_message(question.strip())
            runtime.dialogue.ask(role, question)
            await runtime.queue.join()

        judgment = _prompt_judgment(renderer)
        await _analyze(runtime, case, judgment, renderer)
        helpful = Confirm.ask("AI 판결과의 비교가 판단에 도움이 되었나요?", console=renderer.console)
        if runtime.store.update_last_survey(helpful=helpful) is not None:
            renderer.info("[green]판결 결과 등록 완료 ✓[/green]")


async def _run_analysis_only(settings: Settings, case: CaseFile, judgment: Judgment, renderer: Renderer) -> None:
    async with CourtRuntime(settings, sink=renderer) as runtime:
        runtime.session.select_case(case)
        await _analyze(runtime, case, judgment, renderer)


def _prompt_judgment(renderer: Renderer) -> Judgment:
    console = renderer.console
    verdict = Prompt.ask("판결", choices=[GUILTY, NOT_GUILTY], console=console)
    sentence = None
    mitigation = False
    if verdict == GUILTY:
        sentence = Prompt.ask("형량", choices=list(SENTENCE_OPTIONS), console=console)
        mitigation = Confirm.ask("감경 사유를 고려하셨습니까?", default=False, console=console)
    reason = Prompt.ask("판결 이유", console=console)
    return Judgment(verdict=verdict, reason=reason, sentence=sentence, mitigation=mitigation)


async def _analyze(runtime: CourtRuntime, case: CaseFile, judgment: Judgment, renderer: Renderer) -> None:
    runtime.session.judgment = judgment
    with renderer.console.status(PROGRESS_MESSAGES[0]) as status:
        ticker = asyncio.create_task(_tick_progress(status))
        try:
            outcome = await runtime.analysis.analyze(case, judgment)
        finally:
            ticker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ticker
        status.update("분석이 완료되었습니다.")
    logger.debug("analysis.rendered source={}", outcome.source)
    runtime.session.analysis = outcome.result
    renderer.analysis(case, judgment, outcome.result)


async def _tick_progress(status) -> None:
    for message in PROGRESS_MESSAGES[1:]:
        await asyncio.sleep(PROGRESS_INTERVAL_SECONDS)
        status.update(message)
