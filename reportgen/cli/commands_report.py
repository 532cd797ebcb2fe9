from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from ..engine import ReportEngine
from ..models import GeneratedReport
from .helpers import build_audit, build_rate_limiter, load_config, print_json, read_json


def render_report(console: Console, report: GeneratedReport) -> None:
    console.print(Panel.fit(f"[bold cyan]{report.title}[/bold cyan]", border_style="green"))
    if report.summary:
        console.print(Markdown(report.summary))
    for section in report.sections:
        console.print()
        console.print(f"[bold yellow]{section.title}[/bold yellow]")
        console.print(Markdown(section.content))


def register(app: typer.Typer, console: Console) -> None:
    @app.command()
    def report(
        request: Path = typer.Option(..., exists=True, readable=True, help="Request JSON {selectedResults, sources, prompt, platformModel}"),
        model: Optional[str] = typer.Option(None, help="Override platform/model selector, e.g. openai__gpt-4o"),
        config: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Config overlay YAML"),
        output: Optional[Path] = typer.Option(None, help="Write the report JSON to this path"),
        as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload instead of rendered markdown"),
    ):
        """Generate a structured report from a request file."""
        cfg = load_config(config)
        payload = read_json(request)
        if model:
            payload["platformModel"] = model

        audit = build_audit(cfg)
        engine = ReportEngine(cfg, rate_limiter=build_rate_limiter(cfg), audit_service=audit)
        with console.status("[cyan]Generating report...[/cyan]"):
            outcome = asyncio.run(engine.handle(payload))
        if audit:
            audit.finalize_session()

        if not outcome.ok:
            console.print(f"[red]✗ {outcome.error}[/red] [dim]({outcome.error_kind}, status {outcome.status_code})[/dim]")
            raise typer.Exit(code=1)

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(json.dumps(outcome.to_payload(), indent=2, ensure_ascii=False), encoding="utf-8")
            console.print(f"[green]✓ Report written to {output}[/green]")

        if as_json:
            print_json(console, outcome.to_payload())
        else:
            render_report(console, outcome.report)
        console.print(f"[dim]Total time: {outcome.timings_ms.get('total', 0.0):.2f}ms[/dim]")
