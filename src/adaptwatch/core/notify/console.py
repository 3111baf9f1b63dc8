"""
Console notification dispatcher.

Renders qualification results as Rich tables. Stands in for the email
dispatcher when the pipeline is driven from the terminal.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adaptwatch.core.qualify.classifier import QualificationStatus
from adaptwatch.core.qualify.result import QualificationResult

STATUS_STYLES = {
    QualificationStatus.QUALIFIED: "green",
    QualificationStatus.CONDITIONAL: "yellow",
    QualificationStatus.DISQUALIFIED: "red",
}


def format_value(value: float | None) -> str:
    if value is None:
        return "-"
    return f"£{value:,.0f}"


def build_results_table(title: str, results: Sequence[QualificationResult]) -> Table:
    """Build a table with one row per result."""
    table = Table(title=title, show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Score", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Tender", style="cyan", max_width=50)
    table.add_column("Buyer", max_width=30)
    table.add_column("Value", justify="right")
    table.add_column("Deadline")
    table.add_column("Why", max_width=60)

    for result in results:
        style = STATUS_STYLES.get(result.status, "default")
        why = [f"[green]+[/green] {escape(p)}" for p in result.passes]
        why.extend(f"[red]-[/red] {escape(i)}" for i in result.issues)
        table.add_row(
            str(result.score),
            f"[{style}]{result.status.value}[/{style}]",
            f"{escape(result.tender.title)}\n[dim]{escape(result.tender.url)}[/dim]",
            escape(result.tender.buyer),
            format_value(result.tender.value),
            (result.tender.deadline or "-")[:10],
            "\n".join(why),
        )

    return table


class ConsoleDispatcher:
    """Prints each account's results to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def dispatch(self, account_id: str, results: Sequence[QualificationResult]) -> None:
        if not results:
            self.console.print(f"[dim]{escape(account_id)}: no matching tenders[/dim]")
            return
        self.console.print(build_results_table(f"Matches for {account_id}", results))
