"""
Report generation for slop scan results.

Generates human-readable and machine-readable reports.
"""

import json
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from .analyzer import PipelineResult
from .models import Severity, Violation


SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

VERDICT_COLORS = {
    "OK": "green",
    "MEDIUM": "yellow",
    "HIGH": "red",
    "SKIP": "dim",
}


class Reporter:
    """Generate reports from scan results."""

    def __init__(self, console: Optional[Console] = None, max_findings: Optional[int] = None):
        self.console = console or Console()
        self.max_findings = max_findings

    def _shown(self, result: PipelineResult) -> list[Violation]:
        if self.max_findings is None:
            return result.findings
        return result.findings[:self.max_findings]

    def print_summary(self, result: PipelineResult) -> None:
        """Print a summary report to the console."""
        self.console.print()
        self.console.print(Panel(f"[bold]deslop report[/bold] - {result.root}", style="blue"))

        if result.error:
            self.console.print(f"[red]Error:[/red] {result.error}")
            return

        summary = result.summary
        by_severity = summary.get("by_severity", {})
        color = self._get_severity_color(by_severity)
        self.console.print(Panel(
            f"[bold]Findings:[/bold] [{color}]{summary.get('total', 0)}[/{color}]\n"
            + "  ".join(
                f"[{SEVERITY_COLORS[s]}]{s.value}: {by_severity.get(s.value, 0)}[/{SEVERITY_COLORS[s]}]"
                for s in Severity
            )
            + f"\n\n[bold]Files Analyzed:[/bold] {result.files_analyzed}"
            + f"\n[bold]Files Skipped:[/bold] {result.skipped}",
            title="Summary",
            border_style=color,
        ))

        self._print_verdicts(result)
        self._print_top_patterns(result)
        self._print_findings(result)

        self.console.print()
        self.console.print(f"[dim]Scan completed in {result.duration:.1f}s[/dim]")

    def _get_severity_color(self, by_severity: dict) -> str:
        """Color of the most severe level that has findings."""
        for severity in Severity:
            if by_severity.get(severity.value):
                return SEVERITY_COLORS[severity]
        return "green"

    def _print_verdicts(self, result: PipelineResult) -> None:
        if not result.verdicts:
            return

        table = Table(title="Repository Checks", box=box.ROUNDED)
        table.add_column("Check", style="bold")
        table.add_column("Verdict", justify="center")
        for rule_id, verdict in result.verdicts.items():
            color = VERDICT_COLORS.get(verdict, "white")
            table.add_row(rule_id, f"[{color}]{verdict}[/{color}]")
        self.console.print(table)

    def _print_top_patterns(self, result: PipelineResult, limit: int = 10) -> None:
        top = list(result.summary.get("top_patterns", {}).items())[:limit]
        if not top:
            self.console.print(Panel("[green]No slop found.[/green]", title="Findings"))
            return

        self.console.print(Panel(
            "\n".join(f"• {rule_id}: {count}" for rule_id, count in top),
            title="Top Patterns",
            border_style="yellow",
        ))

    def _print_findings(self, result: PipelineResult) -> None:
        shown = self._shown(result)
        if not shown:
            return

        table = Table(title="Findings", box=box.ROUNDED)
        table.add_column("Severity", justify="center")
        table.add_column("Location", style="cyan", max_width=50)
        table.add_column("Rule")
        table.add_column("Message", max_width=60)

        for violation in shown:
            color = SEVERITY_COLORS[violation.severity]
            table.add_row(
                f"[{color}]{violation.severity.value}[/{color}]",
                f"{violation.file}:{violation.line}",
                violation.rule_id or violation.category,
                violation.message,
            )
        self.console.print(table)

        hidden = len(result.findings) - len(shown)
        if hidden > 0:
            self.console.print(f"[dim]... and {hidden} more findings[/dim]")

    def to_dict(self, result: PipelineResult) -> dict:
        return {
            "root": result.root,
            "timestamp": datetime.now().isoformat(),
            "error": result.error,
            "summary": result.summary,
            "verdicts": result.verdicts,
            "files_analyzed": result.files_analyzed,
            "skipped": result.skipped,
            "duration_seconds": round(result.duration, 3),
            "findings": [v.to_dict() for v in self._shown(result)],
        }

    def to_json(self, result: PipelineResult) -> str:
        """Convert scan results to JSON format."""
        return json.dumps(self.to_dict(result), indent=2)
