"""
Abstract base class for LLM providers.
"""

import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import ProviderError


@dataclass
class LLMResponse:
    """Standard response from LLM providers."""
    content: Optional[str]
    raw_response: Any
    provider: str
    model: str
    processing_time: float
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    Subclasses turn one prompt string into a single vendor call and hand back
    the raw text completion. SDK clients are created lazily so that a missing
    key for one vendor does not prevent the others from being used.
    """

    kind: str = ""

    def __init__(self, config: Dict[str, Any], client: Any = None):
        """Initialize provider with configuration and an optional prebuilt client."""
        self.config = config
        self.name = self.__class__.__name__
        self.timeout = config.get("timeout", 120)
        self._client = client

    @abstractmethod
    async def generate(self, prompt: str, model_id: str) -> LLMResponse:
        """Generate a completion for ``prompt`` with the vendor model ``model_id``."""

    @abstractmethod
    def _create_client(self, api_key: str) -> Any:
        """Build the vendor SDK client."""

    @property
    def client(self) -> Any:
        if self._client is None:
            env_name = self.config.get("api_key_env", "")
            api_key = os.getenv(env_name) if env_name else None
            if not api_key:
                raise ProviderError(
                    f"{self.kind} API key not found. Please set the {env_name} environment variable.",
                    provider=self.kind,
                )
            self._client = self._create_client(api_key)
        return self._client

    @staticmethod
    def start_timer() -> float:
        return time.perf_counter()

    @staticmethod
    def stop_timer(start: float) -> float:
        return time.perf_counter() - start
