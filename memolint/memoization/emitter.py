# Turn a naming mismatch into findings anchored at the right source spans.

from __future__ import annotations

import logging
from typing import List

from memolint.context import FileContext, location_for
from memolint.findings.models import Finding
from memolint.memoization.naming import NamingPolicy
from memolint.memoization.patterns import (
    DefinedGuardPattern,
    MemoizationCandidate,
    MethodContext,
    OrAssignPattern,
)
from memolint.syntax.nodes import Span

logger = logging.getLogger(__name__)


def _anchors(candidate: MemoizationCandidate) -> tuple[str, List[Span]]:
    """Variable name and offense spans for a candidate."""
    if isinstance(candidate, OrAssignPattern):
        return candidate.variable.name, [candidate.variable.span]
    if isinstance(candidate, DefinedGuardPattern):
        # Every spot a reader has to rename together.
        return candidate.variable, [
            candidate.defined_check.span,
            candidate.return_node.span,
            candidate.assign_node.name_span,
        ]
    raise TypeError(f"Unknown memoization candidate: {type(candidate).__name__}")


def emit(
    candidate: MemoizationCandidate,
    method: MethodContext,
    policy: NamingPolicy,
    context: FileContext,
    rule_id: str,
    severity: str = "convention",
) -> List[Finding]:
    """
    Return findings for candidate, or an empty list when its variable name
    is acceptable for the enclosing method under policy.
    """
    variable, spans = _anchors(candidate)
    if policy.matches(method.name, variable):
        return []

    message = policy.message(variable, method.name)
    logger.debug(
        "%s: %s in method %s does not match (%d location(s))",
        context.path,
        variable,
        method.name,
        len(spans),
    )
    return [
        Finding(
            rule_id=rule_id,
            message=message,
            location=location_for(context, span),
            severity=severity,
        )
        for span in spans
    ]
