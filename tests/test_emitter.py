"""Tests for memolint.memoization.emitter."""

from pathlib import Path

import pytest

from memolint.context import FileContext
from memolint.memoization.emitter import emit
from memolint.memoization.naming import NamingPolicy, Style
from memolint.memoization.patterns import DefinedGuardPattern, MethodContext, OrAssignPattern
from memolint.parser import parse_bytes
from memolint.syntax.nodes import InstanceVariable, IvarAssign, MethodDef, Span

SOURCE = b"@bar @bar @bar = 1"
RULE_ID = "memoized-instance-variable-name"


def _span(start: int, end: int) -> Span:
    return Span(start_byte=start, end_byte=end, line=1, column=start + 1, end_line=1, end_column=end + 1)


def _context() -> FileContext:
    return FileContext(path=Path("memo.rb"), source=SOURCE, tree=parse_bytes(SOURCE))


def _method(name: str) -> MethodContext:
    node = MethodDef(name=name, body=None, span=_span(0, 1), name_span=_span(0, 1))
    return MethodContext(name=name, node=node)


def _or_assign() -> OrAssignPattern:
    return OrAssignPattern(
        variable=InstanceVariable(name="@bar", span=_span(0, 4)),
        is_sole_or_final_statement=True,
    )


def _defined_guard() -> DefinedGuardPattern:
    assign = IvarAssign(name="@bar", value=None, span=_span(10, 18), name_span=_span(10, 14))
    return DefinedGuardPattern(
        defined_check=InstanceVariable(name="@bar", span=_span(0, 4)),
        return_node=InstanceVariable(name="@bar", span=_span(5, 9)),
        assign_node=assign,
        variable="@bar",
    )


def test_or_assign_mismatch_yields_one_finding():
    findings = emit(_or_assign(), _method("foo"), NamingPolicy(), _context(), RULE_ID)
    assert len(findings) == 1
    f = findings[0]
    assert f.rule_id == RULE_ID
    assert f.severity == "convention"
    assert f.location.column == 1
    assert f.location.snippet == "@bar"
    assert "Use `@foo` instead." in f.message


def test_defined_guard_mismatch_yields_three_findings_with_same_message():
    findings = emit(_defined_guard(), _method("foo"), NamingPolicy(), _context(), RULE_ID)
    assert [f.location.column for f in findings] == [1, 6, 11]
    assert len({f.message for f in findings}) == 1
    assert all(f.location.snippet == "@bar" for f in findings)


@pytest.mark.parametrize("candidate", [_or_assign(), _defined_guard()])
def test_match_yields_nothing(candidate):
    assert emit(candidate, _method("bar"), NamingPolicy(), _context(), RULE_ID) == []


def test_initializer_yields_nothing():
    assert emit(_or_assign(), _method("initialize"), NamingPolicy(Style.REQUIRED), _context(), RULE_ID) == []


def test_custom_severity():
    findings = emit(_or_assign(), _method("foo"), NamingPolicy(), _context(), RULE_ID, severity="warning")
    assert findings[0].severity == "warning"


def test_emission_is_deterministic():
    first = emit(_defined_guard(), _method("foo"), NamingPolicy(), _context(), RULE_ID)
    second = emit(_defined_guard(), _method("foo"), NamingPolicy(), _context(), RULE_ID)
    assert first == second
