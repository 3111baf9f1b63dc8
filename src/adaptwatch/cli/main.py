"""
AdaptWatch CLI - Main entry point.

A terminal-first tender finder that qualifies adaptation and
accessibility contracts against contractor profiles.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from adaptwatch import __app_name__, __version__
from adaptwatch.core.config import AppConfig, load_app_config, validate_app_config_file
from adaptwatch.core.errors import ConfigError, ProfileError
from adaptwatch.core.logging import setup_logging

# Load environment variables from .env (if present)
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name=__app_name__,
    help="Find and qualify home adaptation tenders",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """AdaptWatch - Adaptation tender discovery and qualification."""
    pass


def load_config_or_exit(config_path: Optional[Path]) -> AppConfig:
    """Load app config and set up logging, exiting with code 1 on error."""
    try:
        config = load_app_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/red] {e}")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    setup_logging(config.logging, console=err_console)
    return config


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import tenders  # noqa: E402

app.add_typer(tenders.app, name="tenders", help="Discover and check tenders")


# =============================================================================
# Init Command
# =============================================================================


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Initialize AdaptWatch configuration.

    Creates configs/app.yaml and an example configs/profiles.yaml.
    Existing files are left alone unless --force is given.
    """
    created = []

    for dir_path in (Path("configs"), Path("logs")):
        dir_path.mkdir(parents=True, exist_ok=True)

    app_config_path = Path("configs/app.yaml")
    if not app_config_path.exists() or force:
        app_config_path.write_text(DEFAULT_APP_CONFIG, encoding="utf-8")
        created.append(f"  - [cyan]{app_config_path}[/cyan] - Application configuration")

    profiles_path = Path("configs/profiles.yaml")
    if not profiles_path.exists() or force:
        profiles_path.write_text(EXAMPLE_PROFILES, encoding="utf-8")
        created.append(f"  - [cyan]{profiles_path}[/cyan] - Example contractor profiles")

    summary = "\n".join(created) if created else "  [dim]nothing (files already exist)[/dim]"

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - AdaptWatch initialized[/bold green]\n\n"
        f"Created:\n{summary}\n\n"
        "Next steps:\n"
        "  1. Edit your profile: [yellow]configs/profiles.yaml[/yellow]\n"
        "  2. Look for tenders: [yellow]adaptwatch tenders discover[/yellow]\n"
        "  3. Qualify every profile: [yellow]adaptwatch run[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


DEFAULT_APP_CONFIG = """\
# AdaptWatch Configuration

config_dir: configs
profiles_file: configs/profiles.yaml

# Upstream notice search
source:
  base_url: ${ADAPTWATCH_SOURCE_URL:-https://www.contractsfinder.service.gov.uk/Published/Notices/OCDS/Search}
  jurisdictions:
    - Birmingham
    - Dudley
    - Sandwell
    - Walsall
    - Wolverhampton
    - Solihull
    - Coventry
  search_keywords: [housing, construction, works, maintenance, services]
  published_within_days: 90
  result_limit: 100
  timeout_seconds: 30
  max_retries: 3
  concurrency: 4

# Relevance filter (keywords match as lowercase substrings)
relevance:
  require_context: false

# Qualification thresholds
scoring:
  minimum_insurance: 5000000
  minimum_experience_years: 1
  qualified_threshold: 25
  conditional_threshold: 15

results:
  top_n: 5

logging:
  level: INFO
  file: logs/adaptwatch.log
  json_format: true
  rich_console: true
"""

EXAMPLE_PROFILES = """\
# Contractor profiles keyed by account id.
# A record may hold the profile directly or under "profile" with a
# subscription_active flag; inactive subscribers are skipped by "run".

example@contractor.co.uk:
  subscription_active: true
  profile:
    turnover: 400000
    public_liability_insurance: 5000000
    years_of_relevant_experience: 6
    has_safeguarding_policy: true
    has_enhanced_background_checks: true
    has_health_safety_policy: true
    has_chas: true
    has_smas: false
    has_constructionline: false
    has_safe_contractor: false
    jurisdiction: Birmingham
"""


# =============================================================================
# Validate Command
# =============================================================================


@app.command()
def validate(
    config_path: Path = typer.Argument(
        Path("configs/app.yaml"),
        help="Path to app.yaml",
    ),
) -> None:
    """Validate an app configuration file."""
    errors = validate_app_config_file(config_path)
    if errors:
        err_console.print(f"[red]Invalid configuration:[/red] {config_path}")
        for error in errors:
            err_console.print(f"  • {error}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] {config_path}")


# =============================================================================
# Run Command
# =============================================================================


@app.command("run")
def run_pass(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to app.yaml (default: configs/app.yaml)",
    ),
    profiles_path: Optional[Path] = typer.Option(
        None,
        "--profiles",
        "-p",
        help="Profiles YAML (default: profiles_file from config)",
    ),
    since: Optional[str] = typer.Option(
        None,
        "--since",
        "-s",
        help='Published since, e.g. "2026-07-01" or "30 days ago"',
    ),
) -> None:
    """Run a qualification pass for every active profile.

    Examples:
        adaptwatch run
        adaptwatch run --profiles configs/profiles.yaml --since "2 weeks ago"
    """
    from adaptwatch.core.interfaces import ProfileStore
    from adaptwatch.core.notify import ConsoleDispatcher
    from adaptwatch.core.orchestrator import run_qualification_pass
    from adaptwatch.core.stores import YamlProfileStore

    from .commands.tenders import build_client, resolve_since, show_stats

    config = load_config_or_exit(config_path)
    published_since = resolve_since(since, config)
    store: ProfileStore = YamlProfileStore(profiles_path or config.profiles_file)

    try:
        profiles = store.load_profiles()
    except ConfigError as e:
        err_console.print(f"[red]Error loading profiles:[/red] {e}")
        raise typer.Exit(1)

    if not profiles:
        console.print("[dim]No active profiles[/dim]")
        return

    async def _run():
        async with build_client(config) as client:
            return await run_qualification_pass(
                profiles,
                config=config,
                client=client,
                dispatcher=ConsoleDispatcher(console),
                published_since=published_since,
            )

    try:
        result = asyncio.run(_run())
    except ProfileError as e:
        err_console.print(f"[red]Invalid profile:[/red] {e}")
        raise typer.Exit(1)

    console.print()
    show_stats(result.stats)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
