"""
Tender commands for discovering and qualifying notices.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adaptwatch.core.config import AppConfig
from adaptwatch.core.config.loader import load_yaml_file
from adaptwatch.core.errors import ConfigError, ProfileError
from adaptwatch.core.normalize.parsing import parse_since
from adaptwatch.core.notify.console import build_results_table, format_value
from adaptwatch.core.orchestrator import RunStats, discover_tenders, qualify_tenders
from adaptwatch.core.qualify.profile import load_profile
from adaptwatch.core.sources import ContractsFinderClient

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Discover and check tenders",
    no_args_is_help=True,
)


def build_client(config: AppConfig) -> ContractsFinderClient:
    """Create the notice-search client for a CLI run."""
    return ContractsFinderClient(config.source)


def resolve_since(since: Optional[str], config: AppConfig) -> date:
    """Parse a --since value, exiting with code 1 if it is not a date."""
    try:
        return parse_since(since, default_days=config.source.published_within_days)
    except ValueError as e:
        err_console.print(f"[red]Invalid --since value:[/red] {e}")
        raise typer.Exit(1)


def show_stats(stats: RunStats) -> None:
    """Print a summary line and any source warnings."""
    duration = f"{stats.duration_seconds:.1f}s" if stats.duration_seconds else "-"
    console.print(
        f"[bold]Run {stats.run_id}:[/bold] "
        f"{stats.jurisdictions_queried} jurisdictions "
        f"({stats.jurisdictions_failed} failed), "
        f"{stats.releases_fetched} releases, "
        f"{stats.tenders_kept} kept "
        f"[dim]({stats.duplicates_dropped} duplicate, "
        f"{stats.irrelevant_dropped} irrelevant, "
        f"{stats.expired_dropped} expired; {duration})[/dim]"
    )

    for warning in stats.warnings[:10]:
        console.print(f"  [yellow]•[/yellow] {escape(warning)}")
    for error in stats.errors:
        console.print(f"  [red]•[/red] {escape(error)}")


def _config(config_path: Optional[Path]) -> AppConfig:
    from adaptwatch.cli.main import load_config_or_exit

    return load_config_or_exit(config_path)


@app.command("discover")
def discover(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to app.yaml (default: configs/app.yaml)",
    ),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        "-s",
        help='Published since, e.g. "2026-07-01" or "30 days ago"',
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON to this file instead of stdout",
    ),
) -> None:
    """List open, relevant tenders across all jurisdictions.

    Examples:
        adaptwatch tenders discover
        adaptwatch tenders discover --since "30 days ago" --format json
        adaptwatch tenders discover -o data/tenders.json
    """
    if format not in ("table", "json"):
        err_console.print(f"[red]Unknown format:[/red] {format}")
        raise typer.Exit(1)

    config = _config(config_path)
    published_since = resolve_since(since, config)

    async def _run():
        async with build_client(config) as client:
            return await discover_tenders(config, client=client, published_since=published_since)

    discovery = asyncio.run(_run())
    discovery.stats.finish()
    data = [tender.public().to_dict() for tender in discovery.tenders]

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        console.print(f"[green]Wrote {len(data)} tenders to[/green] {output}")
        return

    if format == "json":
        console.print_json(json.dumps(data))
        return

    if not discovery.tenders:
        console.print("[dim]No open adaptation tenders found.[/dim]")
    else:
        table = Table(title="Open Tenders", show_header=True, header_style="bold magenta")
        table.add_column("Jurisdiction", style="cyan")
        table.add_column("Title", max_width=60)
        table.add_column("Buyer", max_width=30)
        table.add_column("Value", justify="right")
        table.add_column("Deadline")

        for tender in discovery.tenders:
            table.add_row(
                escape(tender.jurisdiction),
                escape(tender.title),
                escape(tender.buyer),
                format_value(tender.value),
                (tender.deadline or "-")[:10],
            )
        console.print(table)

    console.print()
    show_stats(discovery.stats)


@app.command("check")
def check(
    profile_path: Path = typer.Argument(..., help="YAML file holding one contractor profile"),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to app.yaml (default: configs/app.yaml)",
    ),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        "-s",
        help='Published since, e.g. "2026-07-01" or "30 days ago"',
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        help="Number of results to show (default: results.top_n from config)",
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format (table, json)",
    ),
) -> None:
    """Qualify one contractor profile against current tenders.

    Examples:
        adaptwatch tenders check my_profile.yaml
        adaptwatch tenders check my_profile.yaml --top 10 --format json
    """
    if format not in ("table", "json"):
        err_console.print(f"[red]Unknown format:[/red] {format}")
        raise typer.Exit(1)

    config = _config(config_path)

    try:
        profile = load_profile(load_yaml_file(profile_path), account_id=profile_path.name)
    except ConfigError as e:
        err_console.print(f"[red]Error reading profile:[/red] {e}")
        raise typer.Exit(1)
    except ProfileError as e:
        err_console.print(f"[red]Invalid profile:[/red] {e}")
        raise typer.Exit(1)

    published_since = resolve_since(since, config)

    async def _run():
        async with build_client(config) as client:
            return await discover_tenders(config, client=client, published_since=published_since)

    discovery = asyncio.run(_run())
    results = qualify_tenders(
        discovery.tenders,
        profile,
        config.scoring,
        top_n=config.results.top_n if top is None else top,
    )
    discovery.stats.profiles_evaluated = 1
    discovery.stats.finish()

    if format == "json":
        console.print_json(json.dumps([r.to_dict() for r in results]))
        return

    if results:
        console.print(build_results_table(f"Best matches for {profile_path.name}", results))
    else:
        console.print("[dim]No open adaptation tenders found.[/dim]")

    console.print()
    show_stats(discovery.stats)
