"""Per-trial session state."""

from __future__ import annotations

from contextvars import ContextVar

from verdict.errors import CaseNotFoundError
from verdict.types import AnalysisResult, CaseFile, DialogueTurn, Judgment, Role

_case_context: ContextVar[str] = ContextVar("case")


def current_case() -> str:
    """Id of the case selected in this context, for log records."""
    return _case_context.get("-")


class CourtSession:
    """Selected case, dialogue history per role, and the latest judgment."""

    def __init__(self) -> None:
        self._case: CaseFile | None = None
        self._history: dict[Role, list[DialogueTurn]] = {role: [] for role in Role}
        self.judgment: Judgment | None = None
        self.analysis: AnalysisResult | None = None

    @property
    def case(self) -> CaseFile:
        if self._case is None:
            raise CaseNotFoundError("no case selected")
        return self._case

    def select_case(self, case: CaseFile) -> None:
        self._case = case
        self._history = {role: [] for role in Role}
        self.judgment = None
        self.analysis = None
        _case_context.set(case.id)

    def history(self, role: Role) -> tuple[DialogueTurn, ...]:
        return tuple(self._history[role])

    def record(self, turn: DialogueTurn) -> None:
        self._history[turn.role].append(turn)
