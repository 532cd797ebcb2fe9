from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from ..config.schema import ConfigSchema
from ..errors import UnsupportedModel
from ..models import CatalogEntry
from ..providers.anthropic_provider import AnthropicProvider
from ..providers.base import LLMProvider, LLMResponse
from ..providers.gemini_provider import GeminiProvider
from ..providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMService:
    """Routes a resolved catalog entry to exactly one provider adapter.

    Routing goes through an explicit adapter-kind mapping; there is no
    fan-out and no retry across providers.
    """

    def __init__(self, providers: Mapping[str, LLMProvider]) -> None:
        self._providers: Dict[str, LLMProvider] = dict(providers)

    @classmethod
    def from_config(cls, cfg: ConfigSchema) -> "LLMService":
        pcfg = cfg.providers
        return cls(
            {
                GeminiProvider.kind: GeminiProvider(cfg_to_dict(pcfg.gemini)),
                OpenAIProvider.kind: OpenAIProvider(cfg_to_dict(pcfg.openai)),
                AnthropicProvider.kind: AnthropicProvider(cfg_to_dict(pcfg.anthropic)),
            }
        )

    @property
    def kinds(self) -> list[str]:
        return sorted(self._providers)

    def route(self, entry: CatalogEntry) -> LLMProvider:
        provider = self._providers.get(entry.adapter_kind)
        if provider is None:
            raise UnsupportedModel(entry.model)
        return provider

    async def execute_request(self, *, prompt: str, entry: CatalogEntry) -> LLMResponse:
        provider = self.route(entry)
        logger.debug("Dispatching %s to %s (%s)", entry.selector, provider.name, entry.provider_model)
        return await provider.generate(prompt, entry.provider_model)


def cfg_to_dict(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="python") if hasattr(model, "model_dump") else dict(model)
