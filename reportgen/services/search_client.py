from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import Any, Dict, Optional

import requests

from ..config.schema import SearchConfig
from ..errors import CollaboratorError, InvalidRequest, RateLimited
from ..utils import elapsed_ms
from .audit_service import AuditService
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

FRESHNESS = {
    "24h": "Day",
    "week": "Week",
    "month": "Month",
    "year": "Year",
}
TIME_FILTERS = (*FRESHNESS, "all")


def freshness_for(time_filter: str) -> str:
    """Bing ``freshness`` value for a time filter; empty for ``all``."""
    return FRESHNESS.get(time_filter, "")


class WebSearchClient:
    """Thin Bing Web Search v7 wrapper returning the provider-native JSON."""

    def __init__(
        self,
        cfg: SearchConfig,
        *,
        session: Optional[Any] = None,
        rate_limiter: Optional[RateLimiter] = None,
        audit_service: Optional[AuditService] = None,
    ) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()
        self.rate_limiter = rate_limiter
        self.audit = audit_service

    def build_params(self, query: str, time_filter: str = "all") -> Dict[str, str]:
        params = {
            "q": query,
            "count": str(self.cfg.results_per_page),
            "mkt": self.cfg.market,
            "safeSearch": self.cfg.safe_search,
            "textFormat": "HTML",
            "textDecorations": "true",
        }
        freshness = freshness_for(time_filter)
        if freshness:
            params["freshness"] = freshness
        return params

    async def search(self, query: str, time_filter: str = "all") -> Dict[str, Any]:
        if not query:
            raise InvalidRequest("Query parameter is required")
        if time_filter not in TIME_FILTERS:
            raise InvalidRequest(f"Unknown time filter: {time_filter}")

        if self.rate_limiter is not None and not await self.rate_limiter.limit(query):
            raise RateLimited()

        subscription_key = os.getenv(self.cfg.api_key_env)
        if not subscription_key:
            raise CollaboratorError("Search API key not configured")

        start = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                self.session.get,
                self.cfg.endpoint,
                params=self.build_params(query, time_filter),
                headers={
                    "Ocp-Apim-Subscription-Key": subscription_key,
                    "Accept-Language": "en-US",
                },
                timeout=self.cfg.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Search API error: %s", e)
            raise CollaboratorError("Failed to fetch search results") from e
        finally:
            fetch_time = elapsed_ms(start)
            logger.info("Time spent on Search API fetch: %.2fms", fetch_time)
            if self.audit:
                self.audit.log_timing("search_fetch", fetch_time, query=query)

        if not response.ok:
            logger.error("Search API returned %s", response.status_code)
            raise CollaboratorError("Failed to fetch search results")

        return response.json()
