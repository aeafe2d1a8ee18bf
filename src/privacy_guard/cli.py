"""Command-line interface for Privacy Guard.

Provides ``analyze``, ``scan`` and ``patterns`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    privacy-guard analyze privacy-policy.html
    cat terms.txt | privacy-guard scan --output json
    privacy-guard patterns --taxonomy custom.json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .analyzer import RiskAnalyzer
from .models import RiskLevel, RiskReport, Severity
from .taxonomy import Taxonomy, default_taxonomy, load_taxonomy

console = Console()

DEFAULT_MAX_CHARS = 15_000


def _get_level_style(level: RiskLevel) -> str:
    """Return a rich style string for a risk level."""
    return {
        RiskLevel.CRITICAL: "bold red",
        RiskLevel.HIGH: "red",
        RiskLevel.MEDIUM: "bold yellow",
        RiskLevel.LOW: "bold green",
    }.get(level, "")


def _get_severity_icon(severity: Severity) -> str:
    """Return an emoji icon for a severity tier."""
    return {
        Severity.CRITICAL: "🚨",
        Severity.HIGH: "🔴",
        Severity.MEDIUM: "🟡",
        Severity.LOW: "🟢",
    }.get(severity, "")


def _load_taxonomy_or_exit(path: Path | None) -> Taxonomy:
    if path is None:
        return default_taxonomy()
    try:
        return load_taxonomy(path)
    except Exception as e:
        console.print(f"[bold red]Error:[/] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="privacy-guard")
@click.option("--verbose", "-v", is_flag=True, help="Show engine log messages.")
def main(verbose: bool) -> None:
    """🛡️ Privacy Guard — offline risk analysis for terms and privacy policies."""
    _configure_logging(verbose)


def _configure_logging(verbose: bool) -> None:
    """Route package logs to stderr, replacing any handler from an earlier run."""
    package_logger = logging.getLogger("privacy_guard")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--save", "-s", type=click.Path(path_type=Path), default=None,
              help="Save the report to a JSON file.")
@click.option("--taxonomy", "-t", "taxonomy_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="JSON taxonomy to use instead of the built-in one.")
@click.option("--max-chars", type=click.IntRange(min=1), default=DEFAULT_MAX_CHARS,
              show_default=True,
              help="Truncate documents longer than this before analysis.")
def analyze(file: Path, output: str, save: Path | None, taxonomy_path: Path | None,
            max_chars: int) -> None:
    """Analyze a policy document (TXT, HTML, PDF or DOCX).

    Example: privacy-guard analyze privacy-policy.html
    """
    analyzer = RiskAnalyzer(taxonomy=_load_taxonomy_or_exit(taxonomy_path))

    with console.status("[bold blue]Analyzing document...", spinner="dots"):
        try:
            report = analyzer.analyze_file(file, max_chars=max_chars)
        except Exception as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    _emit(report, output, save, title=file.name)


@main.command()
@click.option("--text", default=None, help="Text to analyze (defaults to stdin).")
@click.option("--url", default=None, help="Page URL, used for document-type detection.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--taxonomy", "-t", "taxonomy_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="JSON taxonomy to use instead of the built-in one.")
def scan(text: str | None, url: str | None, output: str, taxonomy_path: Path | None) -> None:
    """Analyze text given with --text or piped on stdin.

    Example: pbpaste | privacy-guard scan
    """
    if text is None:
        text = click.get_text_stream("stdin").read()
    analyzer = RiskAnalyzer(taxonomy=_load_taxonomy_or_exit(taxonomy_path))
    report = analyzer.analyze(text, url=url)
    _emit(report, output, None, title=url or "stdin")


@main.command()
@click.option("--taxonomy", "-t", "taxonomy_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="JSON taxonomy to list instead of the built-in one.")
def patterns(taxonomy_path: Path | None) -> None:
    """List the legal patterns and red flags in the taxonomy."""
    taxonomy = _load_taxonomy_or_exit(taxonomy_path)

    table = Table(title=f"Legal Patterns — {taxonomy.source}")
    table.add_column("Key", style="cyan")
    table.add_column("Severity", justify="center", width=10)
    table.add_column("Description", style="white")
    for pattern in sorted(taxonomy.legal_patterns, key=lambda p: -p.severity.rank):
        table.add_row(
            pattern.key,
            f"{_get_severity_icon(pattern.severity)} {pattern.severity.value}",
            escape(pattern.description),
        )
    console.print(table)

    flags = Table(title="Red Flags")
    flags.add_column("Key", style="cyan")
    flags.add_column("Severity", justify="center", width=10)
    flags.add_column("Keywords (in order)", style="dim")
    for rule in taxonomy.red_flags:
        flags.add_row(rule.key, rule.severity.value, ", ".join(rule.keywords))
    console.print(flags)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _emit(report: RiskReport, output: str, save: Path | None, title: str) -> None:
    if output == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _render_report(report, title)

    if save:
        save.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        console.print(f"\n[dim]Report saved to {save}[/]")


def _render_report(report: RiskReport, title: str) -> None:
    """Render a RiskReport with rich formatting."""
    style = _get_level_style(report.risk_level)
    console.print()
    console.print(Panel(
        f"[{style}]{report.risk_level.value.upper()} RISK[/] | Score: {report.risk_score}/100 | "
        f"Privacy score: {report.privacy_score}/100 | "
        f"Reading grade: {report.readability_grade}\n\n{escape(report.summary)}",
        title=f"🛡️ {title}",
        border_style="blue",
    ))

    if report.is_degraded:
        return

    if report.reasons:
        console.print("[bold]Why[/]")
        for i, reason in enumerate(report.reasons, 1):
            console.print(f"  {i}. {escape(reason)}")
        console.print()

    if report.legal_patterns:
        table = Table(title="Legal Patterns", show_lines=True)
        table.add_column("Pattern", style="cyan", width=22)
        table.add_column("Severity", justify="center", width=10)
        table.add_column("Count", justify="right", width=6)
        table.add_column("Example", style="white", max_width=60)
        for finding in sorted(report.legal_patterns, key=lambda f: -f.severity.rank):
            table.add_row(
                finding.key.replace("_", " ").title(),
                Text(finding.severity.value.upper(),
                     style="bold red" if finding.severity.rank >= 2 else "yellow"),
                str(finding.count),
                escape(finding.examples[0]) if finding.examples else "",
            )
        console.print(table)
        console.print()

    if report.contradictions:
        console.print("[bold red]Contradictions[/]")
        for record in report.contradictions:
            console.print(f"  🚨 {record.description}")
            console.print(f"      claim: [dim]{escape(record.claim_example)}[/]")
            console.print(f"      but:   [dim]{escape(record.contradiction_example)}[/]")
        console.print()

    matched = report.matched_red_flags
    if matched:
        console.print(f"[bold]Red Flags[/] ({len(matched)}/{len(report.red_flags)})")
        for flag in matched:
            console.print(f"  {_get_severity_icon(flag.severity)} {flag.key}: {flag.detail}")
        console.print()

    entities = report.entities
    if entities.high_risk or entities.third_parties:
        table = Table(title="Mentioned Data & Recipients")
        table.add_column("Category", style="cyan", width=18)
        table.add_column("Terms", style="white")
        for label, terms in (
            ("High-risk data", entities.high_risk),
            ("Medium-risk data", entities.medium_risk),
            ("Third parties", entities.third_parties),
            ("Purposes", entities.purposes),
            ("Jurisdictions", entities.jurisdictions),
        ):
            if terms:
                table.add_row(label, ", ".join(terms))
        console.print(table)
        console.print()

    console.print(
        f"Complex sentences: {report.complexity_ratio:.0%} | "
        f"Vague terms: {report.vague_term_count} ({report.vague_language.severity.value})"
    )
    console.print()


if __name__ == "__main__":
    main()
