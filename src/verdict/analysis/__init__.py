"""Verdict analysis for verdict."""

from .base import AnalysisRequest, Analyzer
from .fallback import FallbackAnalyzer
from .orchestrator import AnalysisOrchestrator, AnalysisOutcome
from .remote import RemoteAnalyzer, coerce_analysis

__all__ = [
    "AnalysisOrchestrator",
    "AnalysisOutcome",
    "AnalysisRequest",
    "Analyzer",
    "FallbackAnalyzer",
    "RemoteAnalyzer",
    "coerce_analysis",
]
