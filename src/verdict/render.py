"""Terminal rendering for trials and analysis results."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Protocol

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from verdict.inference.stream import render_display
from verdict.types import AnalysisResult, CaseFile, DialogueTurn, Judgment, RetryNotice, Role

STRONG_RE = re.compile(r"<strong>(.*?)</strong>")
JUDGE_PREFIX = "판사(나) : "


class DialogueSink(Protocol):
    """Receives live dialogue output; never feeds anything back."""

    def pending(self, role: Role) -> None: ...

    def retrying(self, role: Role, notice: RetryNotice) -> None: ...

    def update(self, role: Role, display: str) -> None: ...

    def complete(self, turn: DialogueTurn) -> None: ...

    def error(self, role: Role, message: str) -> None: ...


def role_prefix(role: Role) -> str:
    return f"{role.label} : "


def _unescape(text: str) -> str:
    return text.replace("&lt;", "<").replace("&gt;", ">")


def display_text(display: str, *, prefix: str = "") -> Text:
    """Convert an escaped display value with <strong> spans into rich Text."""
    text = Text(prefix, style="bold yellow")
    position = 0
    for match in STRONG_RE.finditer(display):
        text.append(_unescape(display[position : match.start()]))
        text.append(_unescape(match.group(1)), style="bold")
        position = match.end()
    text.append(_unescape(display[position:]))
    return text


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._live: Live | None = None

    def info(self, message: str) -> None:
        self.console.print(message)

    def error_message(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def cases(self, cases: Sequence[CaseFile]) -> None:
        table = Table(title="사건 목록")
        table.add_column("ID", style="cyan")
        table.add_column("제목")
        for case in cases:
            table.add_row(case.id, case.title)
        self.console.print(table)

    def scenario(self, case: CaseFile) -> None:
        body = Text()
        body.append(case.scenario + "\n\n")
        body.append("관련 법: ", style="bold")
        body.append(case.law)
        self.console.print(Panel(body, title=case.title))

    def user_message(self, text: str) -> None:
        self.console.print(Text(JUDGE_PREFIX + text, style="cyan"))

    # DialogueSink

    def pending(self, role: Role) -> None:
        self._stop_live()
        self._live = Live(Text(f"{role_prefix(role)}...", style="dim"), console=self.console, transient=True)
        self._live.start()

    def retrying(self, role: Role, notice: RetryNotice) -> None:
        if self._live is not None:
            self._live.update(Text(notice.describe(), style="dim"))

    def update(self, role: Role, display: str) -> None:
        if self._live is not None:
            self._live.update(display_text(display, prefix=role_prefix(role)))

    def complete(self, turn: DialogueTurn) -> None:
        self._stop_live()
        self.console.print(display_text(render_display(turn.text), prefix=role_prefix(turn.role)))

    def error(self, role: Role, message: str) -> None:
        self._stop_live()
        self.console.print(Text(f"{role_prefix(role)}{message}", style="red"))

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    # Results

    def analysis(self, case: CaseFile, judgment: Judgment, result: AnalysisResult) -> None:
        scores = Table.grid(padding=(0, 2))
        scores.add_row(
            "[bold]감정 개입률[/bold]",
            f"분석 결과, 판단의 [bold magenta]{result.emotion_score}%[/bold magenta]가 감정/직관에 기인한 것으로 보입니다.",
        )
        scores.add_row("", Text(result.emotion_reason, style="dim"))
        scores.add_row(
            "[bold]법적 합치성[/bold]",
            f"기존 법리와 양형 기준과의 일치율은 [bold green]{result.legal_score}%[/bold green] 입니다.",
        )
        scores.add_row("", Text(result.legal_reason, style="dim"))
        scores.add_row("[bold]편향 태그[/bold]", Text(" ".join(f"#{tag}" for tag in result.biases), style="yellow"))
        self.console.print(Panel(scores, title="판결 심리 분석"))

        comparison = Table(title="판결 비교")
        comparison.add_column("구분", style="bold")
        comparison.add_column("판결")
        comparison.add_column("이유")
        comparison.add_row("나의 판결", judgment.describe(), f'"{judgment.reason}"')
        comparison.add_row("실제 판결", case.real_case.verdict, case.real_case.reason)
        comparison.add_row("AI 판결", case.ai_case.verdict, case.ai_case.reason)
        self.console.print(comparison)
