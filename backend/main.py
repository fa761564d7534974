"""
Filter Fusion operator CLI.

Lists the shared filter catalog and runs the daily trending filter job
against the configured Firebase project and Gemini models.

Usage:
    python main.py list
    python main.py trend
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from api.dependencies import ServiceContainer
from modules.filters.models import Filter
from shared.exceptions import FilterFusionError
from shared.logging_config import configure_logging

console = Console()


def render_filters(filters: tuple[Filter, ...] | list[Filter]) -> Table:
    """Build a table of filters, newest first."""
    table = Table(title=f"Filters ({len(filters)})")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Opens", justify="right")
    table.add_column("Created")
    table.add_column("ID", style="dim")

    for item in filters:
        created = item.created_at.strftime("%Y-%m-%d %H:%M") if item.created_at else "-"
        table.add_row(
            item.name,
            item.category.value,
            item.type.value,
            str(item.access_count),
            created,
            item.id,
        )
    return table


async def list_filters(container: ServiceContainer) -> int:
    controller = container.controller
    filters = await controller.load()
    if controller.state.error:
        console.print(f"[yellow]Warning:[/yellow] {controller.state.error}")
        console.print("[dim]Showing the built-in filters instead.[/dim]")
    console.print(render_filters(filters))
    return 0


async def run_trend(container: ServiceContainer) -> int:
    created = await container.trends.check_and_generate_daily_trend()
    if created is None:
        console.print("[dim]Today's trending filter already exists.[/dim]")
    else:
        console.print(f"[green]Created trending filter:[/green] {created.name} ({created.id})")
    return 0


async def run(command: str) -> int:
    container = ServiceContainer()
    try:
        if command == "list":
            return await list_filters(container)
        return await run_trend(container)
    except FilterFusionError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1
    except ValueError as e:
        # Missing provider credentials
        console.print(f"[red]Error:[/red] {e}")
        return 1
    finally:
        await container.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Filter Fusion operator CLI")
    parser.add_argument(
        "command",
        choices=["list", "trend"],
        help="list: show the filter catalog; trend: run the daily trending filter job",
    )
    parser.add_argument("--log-level", type=str, help="Override LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)
    return asyncio.run(run(args.command))


if __name__ == "__main__":
    sys.exit(main())
