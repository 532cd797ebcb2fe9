from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from ..errors import ReportError
from ..services.catalog import ModelCatalog
from ..services.llm_service import LLMService
from .helpers import load_config


def register(app: typer.Typer, console: Console) -> None:
    @app.command()
    def models(
        config: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Config overlay YAML"),
    ):
        """List catalog platforms and models with their enablement."""
        cfg = load_config(config)
        catalog = ModelCatalog.from_config(cfg.catalog)

        table = Table(title="Model Catalog", box=box.ROUNDED, header_style="bold cyan", border_style="blue")
        table.add_column("Selector", style="cyan")
        table.add_column("Adapter")
        table.add_column("Provider model", style="dim")
        table.add_column("Enabled", justify="center")
        for entry in catalog.entries():
            default = " [dim](default)[/dim]" if entry.selector == catalog.default_selector else ""
            table.add_row(
                entry.selector + default,
                entry.adapter_kind,
                entry.provider_model,
                "[green]✓[/green]" if entry.enabled else "[red]✗[/red]",
            )
        console.print(table)

    @app.command()
    def validate(
        config: Optional[Path] = typer.Option(None, exists=True, readable=True, help="Config overlay YAML"),
    ):
        """Validate configuration and the catalog's adapter wiring."""
        try:
            cfg = load_config(config)
        except (ValidationError, ValueError) as e:
            console.print(f"[red]✗ Invalid configuration:[/red] {e}")
            raise typer.Exit(code=1)

        catalog = ModelCatalog.from_config(cfg.catalog)
        known = set(LLMService.from_config(cfg).kinds)
        problems = [
            f"{entry.selector}: no adapter registered for '{entry.adapter_kind}'"
            for entry in catalog.entries()
            if entry.adapter_kind not in known
        ]
        try:
            catalog.resolve(catalog.default_selector)
        except ReportError as e:
            problems.append(f"default selector {catalog.default_selector}: {e}")

        if problems:
            for p in problems:
                console.print(f"[red]✗ {p}[/red]")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ Configuration valid[/green] [dim]({len(catalog.entries())} models)[/dim]")
