"""
Typer CLI entry point and orchestration of the analysis pipeline.

- Accepts a Ruby file or a directory
- Finds Ruby files (traversal.find_ruby_files for directories)
- Builds a FileContext for each file
- Runs all enabled rules from config.py
- Prints findings as "file:line:col: SEVERITY [rule] message", or as a
  Rich report with --pretty

Exit codes: 0 no offenses, 1 offenses found, 2 configuration error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer

from memolint.config import Config, ConfigError, get_default_config, get_enabled_rules
from memolint.context import create_context
from memolint.findings.models import Finding
from memolint.memoization.naming import Style
from memolint.parser import create_parser
from memolint.reporting.console import print_findings
from memolint.traversal import find_ruby_files, is_ruby_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="MemoLint - checks that memoized Ruby instance variables match their method names.")


@app.callback()
def cli() -> None:
    """MemoLint command line interface."""


def _collect_ruby_files(target: Path) -> List[Path]:
    """
    Resolve a target path into a list of Ruby files to analyze.

    - If target is a Ruby file, return [target]
    - If target is a directory, use traversal.find_ruby_files()
    - Otherwise, exit with an error.
    """
    if target.is_file():
        if not is_ruby_file(target):
            raise typer.BadParameter(f"Target file must be a Ruby file (.rb), got: {target}")
        return [target]

    if target.is_dir():
        files = find_ruby_files(target)
        if not files:
            logger.warning("No Ruby files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _print_plain(findings: Sequence[Finding]) -> None:
    """Print findings in a simple, grep-like format."""
    if not findings:
        typer.echo("No offenses found.")
        return

    for f in findings:
        typer.echo(f.format_line())


def analyze_files(files: Sequence[Path], config: Config) -> List[Finding]:
    """Run every enabled rule on every file; unreadable files are skipped."""
    parser = create_parser()
    rules = list(get_enabled_rules(config))
    all_findings: List[Finding] = []

    for path in files:
        ctx = create_context(path, parser=parser)
        if ctx is None:
            # File could not be read; error already logged in create_context
            continue
        for rule in rules:
            try:
                rule_findings = rule.run(ctx, config)
            except Exception as exc:  # pragma: no cover - keep going with other files
                logger.exception("Rule %s failed on %s: %s", rule.id, path, exc)
                continue
            all_findings.extend(rule_findings)

    all_findings.sort(key=Finding.sort_key)
    return all_findings


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Ruby file or directory to analyze.",
    ),
    style: Optional[Style] = typer.Option(
        None,
        "--style",
        case_sensitive=False,
        help="Leading underscore style; overrides [tool.memolint] in pyproject.toml.",
    ),
    pretty: bool = typer.Option(False, "--pretty", help="Rich report instead of plain lines."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show remediation hints (with --pretty)."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Analyze a single Ruby file or all Ruby files under a directory."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = get_default_config(style=style, search_path=target)
    except ConfigError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=2)

    files = _collect_ruby_files(target)
    findings = analyze_files(files, config)

    if pretty:
        print_findings(findings, analyzed_files=files, verbose=verbose)
    else:
        _print_plain(findings)

    if findings:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for `python -m memolint.main` and the `memolint` script."""
    app()


if __name__ == "__main__":
    main()
