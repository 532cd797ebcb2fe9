from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ModelConfig(BaseModel):
    enabled: bool = True
    adapter: str
    provider_model: Optional[str] = None  # vendor-side id; defaults to the catalog key


class PlatformConfig(BaseModel):
    enabled: bool = True
    models: Dict[str, ModelConfig] = Field(default_factory=dict)


class CatalogConfig(BaseModel):
    default: str = "google__gemini-flash"
    platforms: Dict[str, PlatformConfig] = Field(default_factory=dict)


class GeminiConfig(BaseModel):
    api_key_env: str = "GEMINI_API_KEY"
    timeout: int = 120


class OpenAIConfig(BaseModel):
    api_key_env: str = "OPENAI_API_KEY"
    timeout: int = 120
    max_retries: int = 0


class AnthropicConfig(BaseModel):
    api_key_env: str = "ANTHROPIC_API_KEY"
    timeout: int = 120
    max_retries: int = 0
    max_tokens: int = 3500
    temperature: float = 0.9


class ProvidersConfig(BaseModel):
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)


class RateLimitConfig(BaseModel):
    enabled: bool = False
    requests: int = 10
    window_seconds: float = 60.0


class SearchConfig(BaseModel):
    endpoint: str = "https://api.bing.microsoft.com/v7.0/search"
    api_key_env: str = "AZURE_SUB_KEY"
    results_per_page: int = 10
    market: str = "en-US"
    safe_search: str = "Moderate"
    timeout: int = 30


class FetchConfig(BaseModel):
    reader_base: str = "https://r.jina.ai/"
    timeout: int = 60


class AuditConfig(BaseModel):
    enabled: bool = True
    directory: str = "logs"
    log_responses: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"
    console: bool = True
    file: Optional[str] = None


class PromptTemplates(BaseModel):
    report: Optional[str] = None


class ConfigSchema(BaseModel):
    """Master configuration model reflecting merged YAML.

    Extra fields are allowed to avoid blocking incremental adoption.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    title: Optional[str] = None
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    rate_limits: RateLimitConfig = Field(default_factory=RateLimitConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    prompts: Optional[PromptTemplates] = None
