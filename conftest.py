"""Shared fixtures: a small catalog, fake providers and a counting rate limiter."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest

from reportgen.config.schema import ConfigSchema
from reportgen.providers.base import LLMProvider, LLMResponse

REPORT_JSON = json.dumps(
    {
        "title": "Battery Outlook",
        "summary": "Solid-state cells are **close**.",
        "sections": [
            {"title": "Findings", "content": "- Energy density is up"},
            {"title": "Outlook", "content": "Production ramps in 2027."},
        ],
    }
)


def catalog_config(**overrides: Any) -> Dict[str, Any]:
    raw: Dict[str, Any] = {
        "catalog": {
            "default": "google__gemini-flash",
            "platforms": {
                "google": {
                    "enabled": True,
                    "models": {
                        "gemini-flash": {"adapter": "gemini", "provider_model": "gemini-2.0-flash"},
                        "gemini-exp": {"enabled": False, "adapter": "gemini"},
                    },
                },
                "openai": {
                    "enabled": True,
                    "models": {
                        "gpt-4o": {"adapter": "openai"},
                        "o1": {"enabled": False, "adapter": "openai"},
                        "gpt-legacy": {"adapter": "davinci"},
                    },
                },
                "anthropic": {
                    "enabled": False,
                    "models": {
                        "sonnet-3.5": {"adapter": "anthropic", "provider_model": "claude-3-5-sonnet-latest"},
                    },
                },
            },
        },
        "audit": {"enabled": False},
        "logging": {"console": False},
    }
    raw.update(overrides)
    return raw


class FakeProvider(LLMProvider):
    """Provider double that records prompts and returns a canned completion."""

    def __init__(self, kind: str, content: Optional[str] = REPORT_JSON, error: Optional[Exception] = None):
        super().__init__({"timeout": 1})
        self.kind = kind
        self.content = content
        self.error = error
        self.calls: List[Dict[str, str]] = []

    def _create_client(self, api_key: str) -> Any:
        raise AssertionError("fake provider never builds a client")

    async def generate(self, prompt: str, model_id: str) -> LLMResponse:
        self.calls.append({"prompt": prompt, "model_id": model_id})
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content,
            raw_response=None,
            provider=self.kind,
            model=model_id,
            processing_time=0.01,
        )


class CountingLimiter:
    def __init__(self, allowed: bool = True):
        self.allowed = allowed
        self.calls: List[str] = []

    async def limit(self, identifier: str) -> bool:
        self.calls.append(identifier)
        return self.allowed


@pytest.fixture
def cfg() -> ConfigSchema:
    return ConfigSchema.model_validate(catalog_config())


@pytest.fixture
def providers() -> Dict[str, FakeProvider]:
    return {
        "gemini": FakeProvider("gemini"),
        "openai": FakeProvider("openai"),
        "anthropic": FakeProvider("anthropic"),
    }
