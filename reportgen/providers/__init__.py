"""
LLM provider implementations.
"""

from .anthropic_provider import AnthropicProvider
from .base import LLMProvider, LLMResponse
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

__all__ = ['AnthropicProvider', 'GeminiProvider', 'LLMProvider', 'LLMResponse', 'OpenAIProvider']
