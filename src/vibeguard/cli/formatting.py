"""Rich formatting helpers for the vibeguard CLI.

Provides functions that format validation reports and auto-fix results
for terminal display. Rich auto-detects TTY and degrades gracefully when
piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from vibeguard.models.findings import ValidationReport
    from vibeguard.models.fixes import AutoFixResult


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_report(
    report: ValidationReport,
    console: Console,
    *,
    path: str = "",
    title: str | None = None,
) -> None:
    """Display a validation report as a findings table plus a verdict line.

    ``title`` is the component title from the preamble, shown as a heading.
    """
    if title:
        console.print(f"[bold]{escape(title)}[/bold]", highlight=False)
    if report.findings:
        table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("Severity", width=8)
        table.add_column("Line", justify="right", style="dim")
        table.add_column("Category", style="cyan")
        table.add_column("Message")
        for finding in report.findings:
            style = "red" if finding.is_error else "yellow"
            table.add_row(
                f"[{style}]{finding.severity.value}[/{style}]",
                str(finding.line) if finding.line is not None else "-",
                finding.category.value,
                escape(finding.message),
            )
        console.print(table)

    prefix = f"{escape(path)}: " if path else ""
    if report.is_valid:
        console.print(
            f"{prefix}[green]valid[/green] ({len(report.warnings)} warning(s))",
            highlight=False,
        )
    else:
        console.print(
            f"{prefix}[red]invalid[/red] ({len(report.errors)} error(s), "
            f"{len(report.warnings)} warning(s))",
            highlight=False,
        )


def format_fixes(result: AutoFixResult, console: Console) -> None:
    """Display applied auto-fixes."""
    if not result.fixes:
        console.print("[dim]No fixes needed.[/dim]")
        return
    for fix in result.fixes:
        console.print(f"[green]fixed[/green] {escape(fix)}", highlight=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
