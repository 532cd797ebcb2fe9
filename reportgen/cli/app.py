from __future__ import annotations

from rich.console import Console
from dotenv import load_dotenv
import typer


console = Console()
app = typer.Typer(add_completion=False, no_args_is_help=True, help="Multi-provider research report synthesis CLI")


def _register_all() -> None:
    from .commands_report import register as register_report
    from .commands_sources import register as register_sources
    from .commands_catalog import register as register_catalog

    register_report(app, console)
    register_sources(app, console)
    register_catalog(app, console)


def main():
    load_dotenv()
    _register_all()
    app()


if __name__ == "__main__":
    main()
