from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..config.schema import FetchConfig
from ..errors import CollaboratorError, InvalidRequest, RateLimited
from ..models import FetchedContent
from ..utils import elapsed_ms
from .audit_service import AuditService
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Fetches readable article text for a URL through the Jina reader."""

    def __init__(
        self,
        cfg: FetchConfig,
        *,
        session: Optional[Any] = None,
        rate_limiter: Optional[RateLimiter] = None,
        audit_service: Optional[AuditService] = None,
    ) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()
        self.rate_limiter = rate_limiter
        self.audit = audit_service

    def reader_url(self, url: str) -> str:
        return f"{self.cfg.reader_base}{quote(url, safe='')}"

    async def fetch(self, url: str) -> FetchedContent:
        if not url:
            raise InvalidRequest("URL is required")

        if self.rate_limiter is not None and not await self.rate_limiter.limit(url):
            raise RateLimited()

        logger.info("Fetching content for URL: %s", url)
        start = time.perf_counter()
        try:
            response = await asyncio.to_thread(self.session.get, self.reader_url(url), timeout=self.cfg.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Error fetching content for %s: %s", url, e)
            raise CollaboratorError("Failed to fetch content") from e
        finally:
            time_spent = elapsed_ms(start)
            logger.info("Time spent fetching content for URL (%s): %.2fms", url, time_spent)
            if self.audit:
                self.audit.log_timing("fetch_content", time_spent, url=url)

        if not response.ok:
            logger.warning("Failed to fetch content for %s: %s", url, response.status_code)
            raise CollaboratorError("Failed to fetch content", status_code=response.status_code)

        return FetchedContent(url=url, content=response.text, time_spent_ms=time_spent)
