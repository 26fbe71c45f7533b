from __future__ import annotations

"""
Typer CLI entry point and orchestration of the analysis pipeline.

- Accepts a .java file or a directory
- Finds .java files (using traversal.find_java_files for directories)
- Builds a FileContext for each file
- Runs all enabled rules from config.py, optionally across a thread pool
- Prints findings with Rich, or as "file:line:col: SEVERITY [rule] message" with --plain

Exits with status 1 when any error-severity finding is reported.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

import typer

from permlint.config import Config, build_contract, get_default_config, get_enabled_rules
from permlint.context import create_context
from permlint.findings.models import Finding
from permlint.findings.sink import FindingSink
from permlint.reporting.console import print_findings, print_plain
from permlint.rules.base import Rule
from permlint.traversal import find_java_files

logger = logging.getLogger(__name__)

app = typer.Typer(help="PermLint - checks that @RuntimePermissions classes forward onRequestPermissionsResult.")


@app.callback()
def _main() -> None:
    """PermLint - PermissionsDispatcher usage checks for Java sources."""


def _collect_java_files(target: Path) -> List[Path]:
    """
    Resolve a target path into a list of .java files to analyze.

    - If target is a .java file, return [target]
    - If target is a directory, use traversal.find_java_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if target.suffix.lower() != ".java":
            raise typer.BadParameter(f"Target file must have .java extension, got: {target}")
        return [target]

    if target.is_dir():
        files = find_java_files(target)
        if not files:
            logger.warning("No .java files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _analyze_file(path: Path, rules: Sequence[Rule], config: Config, sink: FindingSink) -> None:
    """Run every rule over one file, reporting into sink. Failures stay local to the file."""
    ctx = create_context(path)
    if ctx is None:
        # File could not be read; error already logged in create_context
        return
    for rule in rules:
        try:
            sink.extend(rule.run(ctx, config))
        except Exception as exc:  # pragma: no cover - defensive
            logger.exception("Rule %s failed on %s: %s", rule.id, path, exc)


def analyze_paths(files: Sequence[Path], config: Config, jobs: int = 1) -> List[Finding]:
    """
    Analyze files with the enabled rules and return all findings.

    With jobs > 1 files are analyzed concurrently; each worker builds its own
    parser, and findings meet only in the shared FindingSink.
    """
    rules = list(get_enabled_rules(config))
    sink = FindingSink()
    if jobs <= 1:
        for path in files:
            _analyze_file(path, rules, config, sink)
    else:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            list(pool.map(lambda p: _analyze_file(p, rules, config, sink), files))
    logger.info("Analyzed %d file(s): %d finding(s)", len(files), len(sink))
    return sink.findings


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Java file or directory to analyze.",
    ),
    plain: bool = typer.Option(False, "--plain", help="Print one finding per line instead of tables."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show rule explanations and info logs."),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Number of files to analyze in parallel."),
    markers: Optional[List[str]] = typer.Option(
        None,
        "--marker",
        help="Marker annotation name (simple or qualified); repeat for several. Replaces the defaults.",
    ),
    callback: Optional[str] = typer.Option(None, "--callback", help="Callback method that must forward."),
    companion_suffix: Optional[str] = typer.Option(
        None, "--companion-suffix", help="Suffix of the generated companion type name."
    ),
) -> None:
    """
    Analyze a single Java file or all .java files under a directory.
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    contract = build_contract(markers, callback, companion_suffix)
    config: Config = get_default_config(contract)
    rules = list(get_enabled_rules(config))
    if not rules:
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    files = _collect_java_files(target)
    findings = analyze_paths(files, config, jobs=jobs)

    if plain:
        print_plain(findings)
    else:
        print_findings(findings, analyzed_files=files, verbose=verbose, issues=[r.issue for r in rules])

    if any(f.severity.lower() == "error" for f in findings):
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for `python -m permlint.main` and the `permlint` script."""
    app()


if __name__ == "__main__":
    main()
