from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ..errors import ReportError
from ..services.content_fetcher import ContentFetcher
from ..services.search_client import TIME_FILTERS, WebSearchClient
from .helpers import build_audit, build_rate_limiter, fail, load_config, print_json


def register(app: typer.Typer, console: Console) -> None:
    @app.command()
    def search(
        query: str = typer.Argument(..., help="Search query"),
        time_filter: str = typer.Option("all", help=f"One of: {', '.join(TIME_FILTERS)}"),
        config: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Config overlay YAML"),
        raw: bool = typer.Option(False, help="Print the provider-native JSON"),
    ):
        """Run a web search and list the results."""
        cfg = load_config(config)
        client = WebSearchClient(cfg.search, rate_limiter=build_rate_limiter(cfg), audit_service=build_audit(cfg))
        try:
            data = asyncio.run(client.search(query, time_filter))
        except ReportError as e:
            fail(console, e)

        if raw:
            print_json(console, data)
            return

        pages = (data.get("webPages") or {}).get("value") or []
        table = Table(title=f"Results for {query!r}", box=box.ROUNDED, header_style="bold cyan", border_style="blue")
        table.add_column("#", justify="right", style="dim", width=4)
        table.add_column("Title", style="cyan")
        table.add_column("URL", style="dim")
        for i, page in enumerate(pages, 1):
            table.add_row(str(i), str(page.get("name", "")), str(page.get("url", "")))
        console.print(table)

    @app.command()
    def fetch(
        url: str = typer.Argument(..., help="Article URL"),
        config: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Config overlay YAML"),
    ):
        """Fetch readable article content for a URL."""
        cfg = load_config(config)
        fetcher = ContentFetcher(cfg.fetch, rate_limiter=build_rate_limiter(cfg), audit_service=build_audit(cfg))
        try:
            result = asyncio.run(fetcher.fetch(url))
        except ReportError as e:
            fail(console, e)
        print_json(console, result.to_payload())
