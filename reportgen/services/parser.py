from __future__ import annotations

import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from ..errors import MalformedStructuredContent, NoStructuredContent
from ..models import GeneratedReport

logger = logging.getLogger(__name__)


def locate_json_object(text: str) -> str:
    """Return the span from the first '{' to the last '}' in ``text``.

    The model may wrap the document in prose or code fences; everything
    outside the outermost braces is ignored. When no '}' follows the first
    '{', the remainder of the text is returned and left for the parser to
    reject.
    """
    start = text.find("{") if isinstance(text, str) else -1
    if start == -1:
        raise NoStructuredContent()
    end = text.rfind("}")
    if end < start:
        return text[start:]
    return text[start : end + 1]


class ReportParser:
    """Turns a raw completion into a validated ``GeneratedReport``.

    Locating the payload is lenient, parsing it is strict: once isolated,
    the object must decode as JSON and carry a title and at least one section.
    """

    def extract(self, raw_text: str) -> GeneratedReport:
        candidate = locate_json_object(raw_text)
        try:
            data: Any = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.error("JSON parsing error: %s", e)
            raise MalformedStructuredContent() from e

        if not isinstance(data, dict):
            raise MalformedStructuredContent("Report payload must be a JSON object")

        # Provenance comes from the caller, never from the model
        payload: Dict[str, Any] = {k: v for k, v in data.items() if k != "sources"}
        try:
            return GeneratedReport.model_validate(payload)
        except ValidationError as e:
            logger.error("Report payload failed validation: %s", e)
            raise MalformedStructuredContent() from e
