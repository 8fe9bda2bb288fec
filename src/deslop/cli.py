"""
Command-line interface for deslop.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich import box

from . import __version__
from .analyzer import AnalyzerConfig, SlopDetector
from .file_classifier import SOURCE_EXTENSIONS
from .models import Severity
from .registry import default_registry
from .reporter import Reporter, SEVERITY_COLORS


console = Console()

LANGUAGES = sorted(SOURCE_EXTENSIONS)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """
    deslop - Find AI slop in source repositories.

    Scans a repository for debugging leftovers, placeholder code,
    verbose documentation, unbacked quality claims and over-engineering.
    """
    pass


@main.command()
@click.argument("path", required=True)
@click.option(
    "--quick",
    is_flag=True,
    help="Run the regex rules only, skip structural analysis"
)
@click.option(
    "--language", "-l",
    type=click.Choice(LANGUAGES),
    help="Only scan files of this language"
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format"
)
@click.option(
    "--output-file", "-f",
    type=click.Path(),
    help="Output file path (defaults to stdout for json)"
)
@click.option(
    "--max-files", "-m",
    type=int,
    default=1000,
    help="Maximum number of files to scan"
)
@click.option(
    "--max-findings",
    type=int,
    help="Maximum number of findings to report"
)
@click.option(
    "--no-history",
    is_flag=True,
    help="Skip git history (co-change analysis and TODO age checks)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Log skipped files and analyzer details"
)
def scan(
    path: str,
    quick: bool,
    language: Optional[str],
    output: str,
    output_file: Optional[str],
    max_files: int,
    max_findings: Optional[int],
    no_history: bool,
    verbose: bool,
):
    """
    Scan a repository for slop.

    PATH is a local directory.

    Examples:

        deslop scan .

        deslop scan ./repo --quick --language python

        deslop scan ./repo -o json -f report.json
    """
    setup_logging(verbose)
    try:
        config = AnalyzerConfig(
            max_files=max_files,
            enable_history=not no_history,
        )
        detector = SlopDetector(config=config, console=console, show_progress=output == "console")
        reporter = Reporter(console=console, max_findings=max_findings)

        if output == "console":
            console.print(f"[bold blue]Scanning:[/bold blue] {path}")

        result = detector.analyze_repository(path, thoroughness="quick" if quick else "normal", language=language)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if output == "console":
        reporter.print_summary(result)
    else:
        json_output = reporter.to_json(result)
        if output_file:
            Path(output_file).write_text(json_output)
            console.print(f"[green]Report saved to {output_file}[/green]")
        else:
            click.echo(json_output)

    # Exit with appropriate code
    # 0: No critical findings
    # 1: The scan could not run
    # 2: At least one critical finding
    if result.error:
        sys.exit(1)
    sys.exit(2 if result.has_critical else 0)


@main.command()
@click.option(
    "--language", "-l",
    type=click.Choice(LANGUAGES + ["universal"]),
    help="Only list rules for this language"
)
@click.option(
    "--severity", "-s",
    type=click.Choice([s.value for s in Severity]),
    help="Only list rules of this severity"
)
def rules(language: Optional[str], severity: Optional[str]):
    """List the built-in rules."""
    registry = default_registry()
    selected = registry.get_by_criteria(language=language, severity=severity)

    table = Table(title=f"Rules ({len(selected)})", box=box.ROUNDED)
    table.add_column("Rule", style="cyan")
    table.add_column("Severity", justify="center")
    table.add_column("Language")
    table.add_column("Fix")
    table.add_column("Description", max_width=60)

    for rule in selected.values():
        color = SEVERITY_COLORS[rule.severity]
        table.add_row(
            rule.id,
            f"[{color}]{rule.severity.value}[/{color}]",
            rule.language or "any",
            rule.auto_fix.value,
            rule.description + (" [dim](structural)[/dim]" if rule.is_multi_pass else ""),
        )
    console.print(table)


@main.command()
def info():
    """Show information about deslop and its checks."""
    registry = default_registry()
    console.print()
    console.print("[bold blue]deslop[/bold blue]")
    console.print(f"Version: {__version__}")
    console.print(f"Rules: {len(registry)} ({len(registry.multi_pass_rules())} structural)")
    console.print()
    console.print("[bold]Checks:[/bold]")
    console.print()
    console.print("  [cyan]Rule scan[/cyan]")
    console.print("    Debugging leftovers, placeholder code, empty handlers,")
    console.print("    hardcoded secrets and verbose comment phrasing.")
    console.print()
    console.print("  [cyan]Structural analysis[/cyan]")
    console.print("    Doc/code ratios, comment verbosity, dead code,")
    console.print("    stub functions and duplicated literals.")
    console.print()
    console.print("  [cyan]Repository analysis[/cyan]")
    console.print("    Over-engineering metrics, quality claims without evidence,")
    console.print("    unused infrastructure and files that always change together.")
    console.print()
    console.print("[bold]Supported Languages:[/bold]")
    console.print(f"  {', '.join(LANGUAGES)}")
    console.print()
    console.print("[bold]Usage:[/bold]")
    console.print("  deslop scan <path>")
    console.print("  deslop rules --language python")
    console.print()
    console.print("For more details: deslop --help")


if __name__ == "__main__":
    main()
