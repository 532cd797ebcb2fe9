from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console

from ..config.loader import ConfigLoader
from ..config.schema import ConfigSchema
from ..errors import ReportError
from ..services.audit_service import AuditService, setup_logging
from ..services.rate_limiter import SlidingWindowRateLimiter


def load_config(path: Optional[Path]) -> ConfigSchema:
    cfg = ConfigLoader.from_env(path).load()
    setup_logging(cfg.logging)
    return cfg


def build_audit(cfg: ConfigSchema) -> Optional[AuditService]:
    if not cfg.audit.enabled:
        return None
    return AuditService(cfg.audit.directory, log_responses=cfg.audit.log_responses)


def build_rate_limiter(cfg: ConfigSchema) -> Optional[SlidingWindowRateLimiter]:
    if not cfg.rate_limits.enabled:
        return None
    return SlidingWindowRateLimiter.from_config(cfg.rate_limits)


def read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise typer.BadParameter(f"Request file must contain a JSON object: {path}")
    return data


def print_json(console: Console, payload: Any) -> None:
    console.print_json(json.dumps(payload, ensure_ascii=False, default=str))


def fail(console: Console, error: ReportError) -> None:
    console.print(f"[red]✗ {error.message}[/red] [dim]({error.kind}, status {error.status_code})[/dim]")
    raise typer.Exit(code=1)
