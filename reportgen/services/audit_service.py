from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from ..config.schema import LoggingConfig
from ..models import SessionSummary
from ..utils import ensure_dir


class AuditService:
    """Session-scoped sink for timing events and raw model responses (JSONL)."""

    def __init__(self, base_dir: Path | str, session_id: Optional[str] = None, *, log_responses: bool = True) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.base_dir = Path(base_dir)
        self.log_responses = log_responses
        ensure_dir(self.base_dir)

        self.timing_path = self.base_dir / f"timing_{self.session_id}.jsonl"
        self.responses_path = self.base_dir / f"llm_responses_{self.session_id}.jsonl"
        self.failures_path = self.base_dir / f"failures_{self.session_id}.jsonl"
        self.summary_path = self.base_dir / f"summary_{self.session_id}.json"

        self.summary = SessionSummary(
            session_id=self.session_id,
            started_at=datetime.utcnow(),
        )

    def _append_jsonl(self, path: Path, obj: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")

    def log_timing(self, label: str, duration_ms: float, **data: Any) -> None:
        self._append_jsonl(
            self.timing_path,
            {
                "ts": datetime.utcnow().isoformat(),
                "session": self.session_id,
                "label": label,
                "duration_ms": round(duration_ms, 2),
                **data,
            },
        )

    def log_llm_response(self, **data: Any) -> None:
        if not self.log_responses:
            return
        self._append_jsonl(self.responses_path, {"ts": datetime.utcnow().isoformat(), **data})

    def log_success(self) -> None:
        self.summary.succeeded += 1

    def log_failure(self, **data: Any) -> None:
        self.summary.failed += 1
        self._append_jsonl(self.failures_path, {"ts": datetime.utcnow().isoformat(), **data})

    def finalize_session(self) -> None:
        self.summary.completed_at = datetime.utcnow()
        with self.summary_path.open("w", encoding="utf-8") as f:
            json.dump(self.summary.model_dump(mode="json"), f, indent=2)


def setup_logging(cfg: LoggingConfig) -> None:
    """Install rich console and optional file handlers on the package logger."""
    logger = logging.getLogger("reportgen")
    logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
    logger.handlers.clear()

    if cfg.console:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
        )
        logger.addHandler(handler)

    if cfg.file:
        path = Path(cfg.file)
        ensure_dir(path.parent)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)
