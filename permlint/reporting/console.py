# Rich console output: format findings for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from permlint.findings.models import Finding, Issue

# Severity → Rich style
SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _sorted(findings: Sequence[Finding]) -> list[Finding]:
    return sorted(
        findings,
        key=lambda f: (str(f.location.path), f.location.line, f.location.column, f.rule_id),
    )


def format_plain(finding: Finding) -> str:
    """Grep-like single line: path:line:col: SEVERITY [rule] message."""
    loc = finding.location
    return f"{loc.path}:{loc.line}:{loc.column}: {finding.severity.upper()} [{finding.rule_id}] {finding.message}"


def print_plain(findings: Sequence[Finding]) -> None:
    """Print findings one per line, sorted by file and position."""
    if not findings:
        typer.echo("No findings.")
        return
    for f in _sorted(findings):
        typer.echo(format_plain(f))


def print_findings(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path] | None = None,
    verbose: bool = False,
    issues: Sequence[Issue] = (),
    console: Optional[Console] = None,
) -> None:
    """
    Print findings grouped by file, colored by severity, with snippets.
    If verbose, shows each rule's explanation once per file. If analyzed_files
    is provided, shows a file-by-file summary table.
    """
    console = console or Console()
    explanations = {issue.id: issue.explanation for issue in issues}

    if not findings and not analyzed_files:
        console.print(
            Panel(
                "[green]No issues found.[/green]",
                title="PermLint Analysis",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    if not findings and analyzed_files:
        _print_file_summary_table([], analyzed_files, console)
        return

    by_file: dict[str, list[Finding]] = {}
    for f in _sorted(findings):
        by_file.setdefault(str(f.location.path), []).append(f)

    for path, file_findings in by_file.items():
        console.print()
        console.print(Panel(
            f"[bold cyan]{escape(path)}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=10)
        table.add_column("Rule", width=34)
        table.add_column("Message", style="white")

        for f in file_findings:
            loc = f.location
            table.add_row(
                str(loc.line),
                str(loc.column),
                Text(f.severity.upper(), style=_severity_style(f.severity)),
                Text(f"[{f.rule_id}]", style="dim"),
                f.message,
            )

        console.print(table)

        snippets = [f for f in file_findings if f.location.snippet]
        if snippets:
            for f in snippets:
                console.print(f"  [dim]|--[/dim] {escape(f.location.snippet)}")
            console.print()

        if verbose:
            seen_rules: set[str] = set()
            for f in file_findings:
                if f.rule_id in seen_rules:
                    continue
                seen_rules.add(f.rule_id)
                explanation = explanations.get(f.rule_id)
                if explanation:
                    console.print(f"  [dim][Fix][/dim] [{f.rule_id}] {explanation}")
            if seen_rules:
                console.print()

    if analyzed_files:
        _print_file_summary_table(findings, analyzed_files, console)

    _print_summary(findings, console)


def _print_file_summary_table(
    findings: Sequence[Finding],
    analyzed_files: Sequence[Path],
    console: Console,
) -> None:
    """Print a table of passing vs failing files."""
    by_path: dict[str, int] = {}
    for f in findings:
        key = str(f.location.path)
        by_path[key] = by_path.get(key, 0) + 1

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=10)
    table.add_column("Findings", justify="right", width=8)

    failing = sorted((p for p in analyzed_files if str(p) in by_path), key=str)
    passing = sorted((p for p in analyzed_files if str(p) not in by_path), key=str)
    for p in failing:
        table.add_row(str(p), Text("FAIL", style="bold red"), str(by_path[str(p)]))
    for p in passing:
        table.add_row(str(p), Text("OK", style="bold green"), "0")

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    """Print a compact summary of findings."""
    by_severity: dict[str, int] = {}
    for f in findings:
        s = f.severity.lower()
        by_severity[s] = by_severity.get(s, 0) + 1

    total = len(findings)
    summary_parts = [f"[bold]{total} finding{'s' if total != 1 else ''}[/bold]"]
    for sev in ("error", "warning", "info"):
        if sev in by_severity:
            summary_parts.append(f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
