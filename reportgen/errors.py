"""
Error taxonomy for report generation.

Every failure is terminal for the current request. Each error carries a
``kind`` (stable identifier) and the transport-level ``status_code`` the
boundary should answer with.
"""

from __future__ import annotations

from typing import Optional


class ReportError(Exception):
    """Base class for all report generation failures."""

    kind: str = "report_error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequest(ReportError):
    kind = "invalid_request"
    status_code = 400


class RateLimited(ReportError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, message: str = "Too many requests") -> None:
        super().__init__(message)


class CatalogError(ReportError):
    """Raised while resolving a platform/model selector."""

    status_code = 400


class UnknownPlatform(CatalogError):
    kind = "unknown_platform"

    def __init__(self, platform: str) -> None:
        super().__init__(f"{platform} platform does not exist")
        self.platform = platform


class PlatformDisabled(CatalogError):
    kind = "platform_disabled"

    def __init__(self, platform: str) -> None:
        super().__init__(f"{platform} platform is not enabled")
        self.platform = platform


class UnknownModel(CatalogError):
    kind = "unknown_model"

    def __init__(self, model: str) -> None:
        super().__init__(f"{model} model does not exist")
        self.model = model


class ModelDisabled(CatalogError):
    kind = "model_disabled"

    def __init__(self, model: str) -> None:
        super().__init__(f"{model} model is disabled")
        self.model = model


class UnsupportedModel(ReportError):
    """No adapter is registered for a catalog entry that passed validation."""

    kind = "unsupported_model"

    def __init__(self, model: str) -> None:
        super().__init__(f"Invalid platform/model combination: {model}")
        self.model = model


class ProviderError(ReportError):
    """Transport or authentication failure raised by a provider adapter."""

    kind = "provider_error"

    def __init__(self, message: str, *, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider


class EmptyCompletion(ReportError):
    kind = "empty_completion"

    def __init__(self, message: str = "No response from model") -> None:
        super().__init__(message)


class ExtractionError(ReportError):
    """The model ran but its output could not be turned into a report."""


class NoStructuredContent(ExtractionError):
    kind = "no_structured_content"

    def __init__(self, message: str = "Invalid report format") -> None:
        super().__init__(message)


class MalformedStructuredContent(ExtractionError):
    kind = "malformed_structured_content"

    def __init__(self, message: str = "Failed to parse report format") -> None:
        super().__init__(message)


class CollaboratorError(ReportError):
    """Failure from the search or content-fetch collaborators."""

    kind = "collaborator_error"

    def __init__(self, message: str, *, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
