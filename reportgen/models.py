from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class SourceDocument(BaseModel):
    """One retrieved article supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""
    content: str


class CatalogEntry(BaseModel):
    """Resolved platform/model pair from the static catalog."""

    model_config = ConfigDict(frozen=True)

    platform: str
    model: str
    enabled: bool
    adapter_kind: str
    provider_model: str

    @property
    def selector(self) -> str:
        return f"{self.platform}__{self.model}"


class ReportSection(BaseModel):
    title: str
    content: str


class GeneratedReport(BaseModel):
    """Structured report as emitted by the model, plus caller provenance."""

    title: str = Field(min_length=1)
    summary: str = ""
    sections: List[ReportSection] = Field(min_length=1)
    sources: List[Any] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class ReportRequest(BaseModel):
    """Boundary request: ``{selectedResults, sources, prompt, platformModel}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    selected_results: List[SourceDocument] = Field(alias="selectedResults")
    sources: List[Any] = Field(default_factory=list)
    prompt: str
    platform_model: Optional[str] = Field(default=None, alias="platformModel")


class ReportState(str, Enum):
    VALIDATING = "validating"
    RATE_LIMIT_CHECKING = "rate_limit_checking"
    CATALOG_RESOLVING = "catalog_resolving"
    PROMPT_BUILDING = "prompt_building"
    DISPATCHING = "dispatching"
    EXTRACTING = "extracting"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class ReportOutcome(BaseModel):
    """Transport-independent result of one orchestration run."""

    status_code: int = 200
    report: Optional[GeneratedReport] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    states: List[ReportState] = Field(default_factory=list)
    timings_ms: Dict[str, float] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.report is not None

    def to_payload(self) -> Dict[str, Any]:
        if self.report is not None:
            return self.report.model_dump(mode="json")
        return {"error": self.error}


class FetchedContent(BaseModel):
    url: str
    content: str
    time_spent_ms: float

    def to_payload(self) -> Dict[str, Any]:
        return {"content": self.content, "timeSpent": f"{self.time_spent_ms:.2f}ms"}


class SessionSummary(BaseModel):
    session_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    succeeded: int = 0
    failed: int = 0
