"""
Multi-provider research report synthesis.

Given a natural-language analysis request and previously retrieved source
documents, the engine validates the requested platform/model against a
config-driven catalog, renders one synthesis prompt, dispatches it to the
matching provider adapter (Gemini, OpenAI or Anthropic), extracts the
structured report from the completion and attaches the caller's sources.
"""

from .engine import ReportEngine
from .models import GeneratedReport, ReportOutcome, ReportRequest, SourceDocument

__all__ = [
    "GeneratedReport",
    "ReportEngine",
    "ReportOutcome",
    "ReportRequest",
    "SourceDocument",
]
