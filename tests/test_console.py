"""Tests for the Rich console report."""

import io
from pathlib import Path

from rich.console import Console

from memolint.findings.models import Finding, Location
from memolint.reporting.console import print_findings


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=160, color_system=None), buffer


def _finding(path: Path, line: int) -> Finding:
    return Finding(
        rule_id="memoized-instance-variable-name",
        message="Memoized variable `@bar` does not match method name `foo`. Use `@foo` instead.",
        location=Location(path=path, line=line, column=3, snippet="@bar"),
    )


def test_no_findings_panel():
    console, buffer = _console()
    print_findings([], console=console)
    assert "No offenses found." in buffer.getvalue()


def test_findings_grouped_with_summary(tmp_path):
    console, buffer = _console()
    bad = tmp_path / "bad.rb"
    good = tmp_path / "good.rb"
    print_findings([_finding(bad, 4), _finding(bad, 2)], analyzed_files=[bad, good], console=console)
    out = buffer.getvalue()
    assert "bad.rb" in out
    assert "FLAGGED" in out
    assert "OK" in out
    assert "2 offenses" in out
    assert "2 convention" in out
    assert out.index("2: @bar") < out.index("4: @bar")


def test_verbose_shows_remediation(tmp_path):
    console, buffer = _console()
    print_findings([_finding(tmp_path / "bad.rb", 2)], verbose=True, console=console)
    out = buffer.getvalue()
    assert "Fix:" in out
    assert "[memoized-instance-variable-name]" in out


def test_clean_files_summary(tmp_path):
    console, buffer = _console()
    print_findings([], analyzed_files=[tmp_path / "good.rb"], console=console)
    out = buffer.getvalue()
    assert "Files Summary" in out
    assert "0 offenses" in out
