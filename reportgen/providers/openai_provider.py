"""
OpenAI LLM provider implementation.
"""

import logging
from typing import Any, Dict

import openai
from openai import AsyncOpenAI

from ..errors import ProviderError
from .base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider; one user message per call."""

    kind = "openai"

    def __init__(self, config: Dict[str, Any], client: Any = None):
        super().__init__(config, client)
        self.max_retries = config.get("max_retries", 0)

    def _create_client(self, api_key: str) -> Any:
        return AsyncOpenAI(api_key=api_key, timeout=self.timeout, max_retries=self.max_retries)

    async def generate(self, prompt: str, model_id: str) -> LLMResponse:
        """Generate response from OpenAI model.

        Returns ``content=None`` when the first choice carries no text; the
        caller decides how to treat an empty completion.
        """
        start_time = self.start_timer()
        try:
            response = await self.client.chat.completions.create(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI generation failed: {e}", provider=self.kind) from e
        finally:
            logger.info(
                "Time spent in generate (openai/%s): %.2fms",
                model_id,
                self.stop_timer(start_time) * 1000,
            )
        processing_time = self.stop_timer(start_time)

        content = None
        if response.choices:
            content = response.choices[0].message.content

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            raw_response=response.model_dump() if hasattr(response, "model_dump") else response,
            provider=self.kind,
            model=model_id,
            processing_time=processing_time,
            input_tokens=usage.prompt_tokens if usage else None,
            output_tokens=usage.completion_tokens if usage else None,
        )
