"""Rich-powered console output for deployrisk."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from deployrisk import __version__
from deployrisk.assessment.models import Assessment, Impact, RiskLevel

LEVEL_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "dark_orange",
    RiskLevel.CRITICAL: "red",
}

IMPACT_STYLES = {
    Impact.NONE: "dim",
    Impact.LOW: "green",
    Impact.MEDIUM: "yellow",
    Impact.HIGH: "red",
}


class Console:
    """Terminal output for deployrisk using Rich."""

    def __init__(self, stderr: bool = False) -> None:
        self.console = RichConsole(stderr=stderr)

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]deployrisk[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Deployment risk scoring for pull requests[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def markdown(self, text: str) -> None:
        """Render markdown text."""
        self.console.print(Markdown(text))

    def show_assessment(self, assessment: Assessment, critical_files: list[str] | None = None) -> None:
        """Display the score panel and the factor breakdown."""
        color = LEVEL_COLORS[assessment.risk_level]
        m = assessment.metrics

        self.console.print(
            Panel(
                f"[bold]Risk Score:[/bold] [{color}]{assessment.risk_score}/100[/{color}]\n"
                f"[bold]Risk Level:[/bold] [{color}]{assessment.risk_level.value.upper()}[/{color}]\n"
                f"[bold]Files Changed:[/bold] {m.files_changed}\n"
                f"[bold]Lines Changed:[/bold] {m.total_lines} (+{m.additions}/-{m.deletions})\n"
                f"[bold]Recommendation:[/bold] {assessment.recommendation}\n"
                f"[bold]Approval:[/bold] {assessment.approval_required}",
                title="[bold]Risk Assessment Results[/bold]",
                border_style=color,
            )
        )

        table = Table(title="Risk Factors", border_style=color)
        table.add_column("Factor", style="bold")
        table.add_column("Value", justify="right")
        table.add_column("Threshold", justify="right")
        table.add_column("Score", justify="right", style="cyan")
        table.add_column("Impact")

        for f in assessment.factors:
            style = IMPACT_STYLES[f.impact]
            table.add_row(
                f.name,
                str(f.value),
                str(f.threshold),
                str(f.score),
                f"[{style}]{f.impact.value}[/{style}]",
            )
        self.console.print(table)

        if critical_files:
            self.console.print("\n[bold]Critical paths touched:[/bold]")
            for path in critical_files:
                self.console.print(f"  [red]{path}[/red]")


def setup_logging(verbose: bool = False) -> None:
    """Route deployrisk loggers to stderr through Rich."""
    logger = logging.getLogger("deployrisk")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=RichConsole(stderr=True), show_path=False, markup=False
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
