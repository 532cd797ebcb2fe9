"""
Anthropic LLM provider implementation.
"""

import logging
from typing import Any, Dict

import anthropic
from anthropic import AsyncAnthropic

from ..errors import ProviderError
from .base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicProvider(LLMProvider):
    """Anthropic messages provider with fixed output length and temperature."""

    kind = "anthropic"

    def __init__(self, config: Dict[str, Any], client: Any = None):
        super().__init__(config, client)
        self.max_tokens = config.get("max_tokens", 3500)
        self.temperature = config.get("temperature", 0.9)
        self.max_retries = config.get("max_retries", 0)

    def _create_client(self, api_key: str) -> Any:
        return AsyncAnthropic(api_key=api_key, timeout=self.timeout, max_retries=self.max_retries)

    async def generate(self, prompt: str, model_id: str) -> LLMResponse:
        """Generate response from Anthropic model; ``""`` when no text block comes back."""
        start_time = self.start_timer()
        try:
            response = await self.client.messages.create(
                model=model_id,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.AnthropicError as e:
            raise ProviderError(f"Anthropic generation failed: {e}", provider=self.kind) from e
        finally:
            logger.info(
                "Time spent in generate (anthropic/%s): %.2fms",
                model_id,
                self.stop_timer(start_time) * 1000,
            )
        processing_time = self.stop_timer(start_time)

        text = ""
        blocks = getattr(response, "content", None) or []
        if blocks:
            text = getattr(blocks[0], "text", None) or ""

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=text,
            raw_response=response.model_dump() if hasattr(response, "model_dump") else response,
            provider=self.kind,
            model=model_id,
            processing_time=processing_time,
            input_tokens=getattr(usage, "input_tokens", None),
            output_tokens=getattr(usage, "output_tokens", None),
        )
