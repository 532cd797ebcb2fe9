"""
Google Gemini provider implementation.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors

from ..errors import ProviderError
from .base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """Gemini provider covering every configured variant of the vendor.

    The variant is chosen per call from ``model_id`` (flash, flash-thinking,
    experimental, ...); all variants share one client.
    """

    kind = "gemini"

    def __init__(self, config: Dict[str, Any], client: Any = None):
        super().__init__(config, client)

    def _create_client(self, api_key: str) -> Any:
        return genai.Client(
            api_key=api_key,
            http_options={"timeout": int(self.timeout) * 1000},
        )

    async def generate(self, prompt: str, model_id: str) -> LLMResponse:
        """Generate response from the Gemini variant ``model_id``."""
        start_time = self.start_timer()
        try:
            response = await self.client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise ProviderError(f"Gemini generation failed: {e}", provider=self.kind) from e
        finally:
            logger.info(
                "Time spent in generate (gemini/%s): %.2fms",
                model_id,
                self.stop_timer(start_time) * 1000,
            )
        processing_time = self.stop_timer(start_time)

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=_response_text(response),
            raw_response=response,
            provider=self.kind,
            model=model_id,
            processing_time=processing_time,
            input_tokens=getattr(usage, "prompt_token_count", None),
            output_tokens=getattr(usage, "candidates_token_count", None),
        )


def _response_text(response: Any) -> Optional[str]:
    text = getattr(response, "text", None)
    if isinstance(text, str):
        return text
    return None
