"""End-to-end tests for the report orchestration pipeline with fake providers."""

import asyncio
import json

import pytest

from reportgen.config.schema import ConfigSchema
from reportgen.engine import ReportEngine
from reportgen.errors import ProviderError
from reportgen.models import ReportState
from reportgen.services.audit_service import AuditService
from reportgen.services.llm_service import LLMService

from conftest import CountingLimiter, FakeProvider, catalog_config

ARTICLES = [
    {"title": "Grid Storage Today", "url": "https://example.com/a", "content": "Lithium dominates."},
    {"title": "Sodium Rising", "url": "https://example.org/b", "content": "Sodium-ion costs fall."},
]
PROVENANCE = [{"id": 1, "url": "https://example.com/a"}, {"id": 2, "url": "https://example.org/b", "extra": [1, 2]}]


def make_engine(cfg, providers, **kwargs):
    return ReportEngine(cfg, llm=LLMService(providers), **kwargs)


def request(**overrides):
    payload = {
        "selectedResults": ARTICLES,
        "sources": PROVENANCE,
        "prompt": "Compare battery chemistries",
        "platformModel": "openai__gpt-4o",
    }
    payload.update(overrides)
    return payload


def total_calls(providers):
    return sum(len(p.calls) for p in providers.values())


def run(engine, payload):
    return asyncio.run(engine.handle(payload))


def test_successful_report_attaches_sources_verbatim(cfg, providers):
    outcome = run(make_engine(cfg, providers), request())

    assert outcome.ok
    assert outcome.status_code == 200
    assert outcome.report.title == "Battery Outlook"
    assert [s.title for s in outcome.report.sections] == ["Findings", "Outlook"]
    assert outcome.report.sources == PROVENANCE
    assert outcome.to_payload()["sources"] == PROVENANCE
    assert "model_generation" in outcome.timings_ms
    assert "total" in outcome.timings_ms


def test_exactly_one_adapter_call_with_provider_model(cfg, providers):
    run(make_engine(cfg, providers), request(platformModel="google__gemini-flash"))

    assert total_calls(providers) == 1
    call = providers["gemini"].calls[0]
    assert call["model_id"] == "gemini-2.0-flash"
    assert "Title: Sodium Rising" in call["prompt"]


def test_zero_sources_visits_every_state(cfg, providers):
    outcome = run(make_engine(cfg, providers), request(selectedResults=[], sources=[]))

    assert outcome.ok
    assert outcome.report.sources == []
    assert outcome.states == [
        ReportState.VALIDATING,
        ReportState.CATALOG_RESOLVING,
        ReportState.PROMPT_BUILDING,
        ReportState.DISPATCHING,
        ReportState.EXTRACTING,
        ReportState.FINALIZING,
        ReportState.DONE,
    ]


def test_missing_selector_uses_catalog_default(cfg, providers):
    payload = request()
    del payload["platformModel"]
    outcome = run(make_engine(cfg, providers), payload)

    assert outcome.ok
    assert len(providers["gemini"].calls) == 1


def test_disabled_model_is_client_error_without_adapter_call(cfg, providers):
    outcome = run(make_engine(cfg, providers), request(platformModel="openai__o1"))

    assert not outcome.ok
    assert outcome.status_code == 400
    assert outcome.error_kind == "model_disabled"
    assert outcome.to_payload() == {"error": "o1 model is disabled"}
    assert total_calls(providers) == 0
    assert outcome.states[-1] is ReportState.FAILED


@pytest.mark.parametrize(
    "selector, kind",
    [
        ("gpt-4o", "invalid_request"),
        ("mistral__large", "unknown_platform"),
        ("anthropic__sonnet-3.5", "platform_disabled"),
        ("google__gemini-ultra", "unknown_model"),
    ],
)
def test_selector_errors_are_client_errors(cfg, providers, selector, kind):
    outcome = run(make_engine(cfg, providers), request(platformModel=selector))

    assert outcome.status_code == 400
    assert outcome.error_kind == kind
    assert total_calls(providers) == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"prompt": ""},
        {"prompt": "   "},
        {"prompt": None},
        {"selectedResults": None},
        {"selectedResults": "not a list"},
        {"platformModel": ""},
    ],
)
def test_invalid_requests(cfg, providers, overrides):
    outcome = run(make_engine(cfg, providers), request(**overrides))

    assert outcome.status_code == 400
    assert outcome.error_kind == "invalid_request"
    assert outcome.states == [ReportState.VALIDATING, ReportState.FAILED]
    assert total_calls(providers) == 0


def test_missing_prompt_field(cfg, providers):
    payload = request()
    del payload["prompt"]
    outcome = run(make_engine(cfg, providers), payload)
    assert outcome.error_kind == "invalid_request"


def test_rate_limit_rejection_short_circuits_before_catalog():
    cfg = ConfigSchema.model_validate(catalog_config(rate_limits={"enabled": True}))
    providers = {"openai": FakeProvider("openai")}
    limiter = CountingLimiter(allowed=False)
    # even an invalid selector must not reach catalog resolution
    outcome = run(make_engine(cfg, providers, rate_limiter=limiter), request(platformModel="nope__nope"))

    assert outcome.status_code == 429
    assert outcome.error_kind == "rate_limited"
    assert outcome.to_payload() == {"error": "Too many requests"}
    assert limiter.calls == ["report"]
    assert ReportState.CATALOG_RESOLVING not in outcome.states
    assert total_calls(providers) == 0


def test_rate_limiter_consulted_when_enabled():
    cfg = ConfigSchema.model_validate(catalog_config(rate_limits={"enabled": True}))
    providers = {"openai": FakeProvider("openai")}
    limiter = CountingLimiter(allowed=True)
    outcome = run(make_engine(cfg, providers, rate_limiter=limiter), request())

    assert outcome.ok
    assert limiter.calls == ["report"]
    assert outcome.states[:3] == [
        ReportState.VALIDATING,
        ReportState.RATE_LIMIT_CHECKING,
        ReportState.CATALOG_RESOLVING,
    ]


def test_rate_limiter_never_consulted_when_disabled(cfg, providers):
    limiter = CountingLimiter(allowed=False)
    outcome = run(make_engine(cfg, providers, rate_limiter=limiter), request())

    assert outcome.ok
    assert limiter.calls == []
    assert ReportState.RATE_LIMIT_CHECKING not in outcome.states


def test_unregistered_adapter_kind_is_unsupported_model(cfg, providers):
    outcome = run(make_engine(cfg, providers), request(platformModel="openai__gpt-legacy"))

    assert outcome.status_code == 500
    assert outcome.error_kind == "unsupported_model"
    assert total_calls(providers) == 0


def test_provider_failure_is_terminal_and_not_retried(cfg):
    failing = FakeProvider("openai", error=ProviderError("OpenAI generation failed: 401", provider="openai"))
    others = FakeProvider("gemini")
    outcome = run(make_engine(cfg, {"openai": failing, "gemini": others}), request())

    assert outcome.status_code == 500
    assert outcome.error_kind == "provider_error"
    assert len(failing.calls) == 1
    assert others.calls == []
    assert outcome.states[-2] is ReportState.DISPATCHING
    assert "model_generation" in outcome.timings_ms


@pytest.mark.parametrize("content", [None, ""])
def test_empty_completion(cfg, content):
    outcome = run(make_engine(cfg, {"openai": FakeProvider("openai", content=content)}), request())

    assert outcome.error_kind == "empty_completion"
    assert outcome.status_code == 500


def test_unusable_output_is_distinguishable_from_provider_failure(cfg):
    prose = run(make_engine(cfg, {"openai": FakeProvider("openai", content="Sorry, no report.")}), request())
    broken = run(make_engine(cfg, {"openai": FakeProvider("openai", content="{invalid json")}), request())

    assert prose.error_kind == "no_structured_content"
    assert broken.error_kind == "malformed_structured_content"
    assert prose.states[-2] is ReportState.EXTRACTING
    assert broken.states[-2] is ReportState.EXTRACTING


def test_prompt_template_from_config(providers):
    cfg = ConfigSchema.model_validate(catalog_config(prompts={"report": "REQ={{ user_request }}"}))
    run(make_engine(cfg, providers), request())
    assert providers["openai"].calls[0]["prompt"] == "REQ=Compare battery chemistries"


def test_audit_records_timings_and_responses(cfg, providers, tmp_path):
    audit = AuditService(tmp_path, session_id="s1")
    run(make_engine(cfg, providers, audit_service=audit), request())
    run(make_engine(cfg, providers, audit_service=audit), request(platformModel="openai__o1"))
    audit.finalize_session()

    timings = [json.loads(line) for line in (tmp_path / "timing_s1.jsonl").read_text().splitlines()]
    labels = [t["label"] for t in timings]
    assert "model_generation" in labels
    assert "total_report_generation" in labels

    responses = (tmp_path / "llm_responses_s1.jsonl").read_text().splitlines()
    assert json.loads(responses[0])["selector"] == "openai__gpt-4o"

    summary = json.loads((tmp_path / "summary_s1.json").read_text())
    assert summary["succeeded"] == 1
    assert summary["failed"] == 1
