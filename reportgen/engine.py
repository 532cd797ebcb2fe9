from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .config.schema import ConfigSchema
from .errors import EmptyCompletion, InvalidRequest, RateLimited, ReportError
from .models import (
    CatalogEntry,
    GeneratedReport,
    ReportOutcome,
    ReportRequest,
    ReportState,
)
from .services.audit_service import AuditService
from .services.catalog import ModelCatalog
from .services.llm_service import LLMService
from .services.parser import ReportParser
from .services.prompt_builder import PromptBuilder
from .services.rate_limiter import RateLimiter, SlidingWindowRateLimiter
from .utils import elapsed_ms

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY = "report"


class ReportEngine:
    """Runs one report request through the generation pipeline.

    validate -> rate limit (when enabled) -> resolve catalog entry -> build
    prompt -> one adapter call -> extract -> attach sources. Every failure
    is terminal and comes back as a ``ReportOutcome``; ``handle`` does not
    raise ``ReportError``.
    """

    def __init__(
        self,
        config: ConfigSchema,
        *,
        catalog: Optional[ModelCatalog] = None,
        llm: Optional[LLMService] = None,
        prompts: Optional[PromptBuilder] = None,
        parser: Optional[ReportParser] = None,
        rate_limiter: Optional[RateLimiter] = None,
        audit_service: Optional[AuditService] = None,
    ) -> None:
        self.cfg = config
        self.catalog = catalog or ModelCatalog.from_config(config.catalog)
        self.llm = llm or LLMService.from_config(config)
        template = config.prompts.report if config.prompts else None
        self.prompts = prompts or PromptBuilder(template=template)
        self.parser = parser or ReportParser()
        self.rate_limits_enabled = config.rate_limits.enabled
        if rate_limiter is None and self.rate_limits_enabled:
            rate_limiter = SlidingWindowRateLimiter.from_config(config.rate_limits)
        self.rate_limiter = rate_limiter
        self.audit = audit_service

    async def handle(self, payload: Mapping[str, Any] | ReportRequest) -> ReportOutcome:
        run = _Run()
        try:
            report = await self._run(payload, run)
        except ReportError as e:
            run.enter(ReportState.FAILED)
            logger.error("Report generation failed (%s): %s", e.kind, e.message)
            if self.audit:
                self.audit.log_failure(kind=e.kind, error=e.message, status=e.status_code)
            return ReportOutcome(
                status_code=e.status_code,
                error=e.message,
                error_kind=e.kind,
                states=run.states,
                timings_ms=run.timings,
            )

        run.enter(ReportState.DONE)
        total = elapsed_ms(run.started)
        run.timings["total"] = total
        self._timing("total_report_generation", total)
        if self.audit:
            self.audit.log_success()
        return ReportOutcome(report=report, states=run.states, timings_ms=run.timings)

    async def _run(self, payload: Mapping[str, Any] | ReportRequest, run: "_Run") -> GeneratedReport:
        run.enter(ReportState.VALIDATING)
        request = self._validate(payload)
        selector = request.platform_model if request.platform_model is not None else self.catalog.default_selector

        if self.rate_limits_enabled and self.rate_limiter is not None:
            run.enter(ReportState.RATE_LIMIT_CHECKING)
            start = time.perf_counter()
            allowed = await self.rate_limiter.limit(RATE_LIMIT_KEY)
            run.timings["rate_limit"] = elapsed_ms(start)
            self._timing("rate_limit_check", run.timings["rate_limit"])
            if not allowed:
                raise RateLimited()

        run.enter(ReportState.CATALOG_RESOLVING)
        entry = self.catalog.resolve(selector)

        run.enter(ReportState.PROMPT_BUILDING)
        prompt = self.prompts.build(request.selected_results, request.prompt)
        logger.debug("Sending prompt to %s:\n%s", entry.selector, prompt)

        run.enter(ReportState.DISPATCHING)
        text = await self._dispatch(prompt, entry, run)

        run.enter(ReportState.EXTRACTING)
        report = self.parser.extract(text)

        run.enter(ReportState.FINALIZING)
        return report.model_copy(update={"sources": list(request.sources)})

    def _validate(self, payload: Mapping[str, Any] | ReportRequest) -> ReportRequest:
        if isinstance(payload, ReportRequest):
            request = payload
        else:
            try:
                request = ReportRequest.model_validate(payload)
            except ValidationError as e:
                raise InvalidRequest(f"Invalid report request: {_first_error(e)}") from e
        if not request.prompt.strip():
            raise InvalidRequest("Prompt is required")
        if request.platform_model is not None and not request.platform_model.strip():
            raise InvalidRequest("platformModel must not be empty")
        return request

    async def _dispatch(self, prompt: str, entry: CatalogEntry, run: "_Run") -> str:
        start = time.perf_counter()
        try:
            response = await self.llm.execute_request(prompt=prompt, entry=entry)
        finally:
            run.timings["model_generation"] = elapsed_ms(start)
            self._timing("model_generation", run.timings["model_generation"], model=entry.model)

        if self.audit:
            self.audit.log_llm_response(
                selector=entry.selector,
                provider=response.provider,
                model=response.model,
                processing_time=response.processing_time,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                content=response.content,
            )
        if not response.content:
            raise EmptyCompletion()
        return response.content

    def _timing(self, label: str, duration_ms: float, **data: Any) -> None:
        logger.info("Time spent on %s: %.2fms", label.replace("_", " "), duration_ms)
        if self.audit:
            self.audit.log_timing(label, duration_ms, **data)


class _Run:
    """Per-request bookkeeping: visited states and stage timings."""

    def __init__(self) -> None:
        self.started = time.perf_counter()
        self.states: List[ReportState] = []
        self.timings: Dict[str, float] = {}

    def enter(self, state: ReportState) -> None:
        self.states.append(state)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
