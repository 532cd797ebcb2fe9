from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from ..config.schema import CatalogConfig, PlatformConfig
from ..errors import (
    InvalidRequest,
    ModelDisabled,
    PlatformDisabled,
    UnknownModel,
    UnknownPlatform,
)
from ..models import CatalogEntry

SELECTOR_SEPARATOR = "__"


def parse_selector(selector: str) -> Tuple[str, str]:
    """Split ``platform__model`` into its two components."""
    if not isinstance(selector, str) or SELECTOR_SEPARATOR not in selector:
        raise InvalidRequest(f"Invalid platform/model selector: {selector!r}")
    platform, _, model = selector.partition(SELECTOR_SEPARATOR)
    if not platform or not model:
        raise InvalidRequest(f"Invalid platform/model selector: {selector!r}")
    return platform, model


class ModelCatalog:
    """Read-only registry of platforms and their models.

    Resolution checks, in order: platform exists, platform enabled, model
    exists, model enabled. The first failing check decides the error.
    """

    def __init__(self, platforms: Mapping[str, PlatformConfig], *, default_selector: str) -> None:
        self._platforms: Dict[str, PlatformConfig] = dict(platforms)
        self.default_selector = default_selector

    @classmethod
    def from_config(cls, cfg: CatalogConfig) -> "ModelCatalog":
        return cls(cfg.platforms, default_selector=cfg.default)

    def resolve(self, selector: str) -> CatalogEntry:
        platform, model = parse_selector(selector)

        platform_cfg = self._platforms.get(platform)
        if platform_cfg is None:
            raise UnknownPlatform(platform)
        if not platform_cfg.enabled:
            raise PlatformDisabled(platform)

        model_cfg = platform_cfg.models.get(model)
        if model_cfg is None:
            raise UnknownModel(model)
        if not model_cfg.enabled:
            raise ModelDisabled(model)

        return CatalogEntry(
            platform=platform,
            model=model,
            enabled=True,
            adapter_kind=model_cfg.adapter,
            provider_model=model_cfg.provider_model or model,
        )

    def entries(self) -> List[CatalogEntry]:
        """Every configured model, enabled or not, in config order."""
        out: List[CatalogEntry] = []
        for platform, platform_cfg in self._platforms.items():
            for model, model_cfg in platform_cfg.models.items():
                out.append(
                    CatalogEntry(
                        platform=platform,
                        model=model,
                        enabled=platform_cfg.enabled and model_cfg.enabled,
                        adapter_kind=model_cfg.adapter,
                        provider_model=model_cfg.provider_model or model,
                    )
                )
        return out
