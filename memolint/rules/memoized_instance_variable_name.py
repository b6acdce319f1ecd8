# Memoized instance variable naming: the cached ivar of a memoized method
# must be named after the method, following the leading-underscore style.

from __future__ import annotations

import logging
from typing import Any, Optional

from memolint.context import FileContext
from memolint.findings.models import Finding
from memolint.memoization.emitter import emit
from memolint.memoization.naming import NamingPolicy
from memolint.memoization.patterns import match_defined_guard, match_or_assign
from memolint.rules.base import Rule
from memolint.syntax.nodes import DefinedCheck, OrAssign
from memolint.syntax.visitor import Ancestors, walk

logger = logging.getLogger(__name__)


class MemoizedInstanceVariableNameRule(Rule):
    """
    Flags memoized methods whose instance variable does not match the method name.

        def foo
          @something ||= calculate_expensive_thing   # bad: use @foo
        end

        def foo
          return @something if defined?(@something)  # bad, reported at all
          @something = calculate_expensive_thing     # three @something spots
        end

    With Style.REQUIRED the variable must be `@_foo`; with Style.OPTIONAL
    both `@foo` and `@_foo` are accepted. `initialize` is never checked.
    """

    id = "memoized-instance-variable-name"
    name = "Memoized instance variable name"

    def __init__(self, policy: Optional[NamingPolicy] = None) -> None:
        self.policy = policy if policy is not None else NamingPolicy()

    def on_or_assign(self, context: FileContext, node: OrAssign, ancestors: Ancestors) -> list[Finding]:
        match = match_or_assign(node, ancestors)
        if match is None:
            return []
        candidate, method = match
        return emit(candidate, method, self.policy, context, self.id)

    def on_defined(self, context: FileContext, node: DefinedCheck, ancestors: Ancestors) -> list[Finding]:
        match = match_defined_guard(node, ancestors)
        if match is None:
            return []
        candidate, method = match
        return emit(candidate, method, self.policy, context, self.id)

    def run(self, context: FileContext, config: Any) -> list[Finding]:
        findings: list[Finding] = []
        for node, ancestors in walk(context.program):
            if isinstance(node, OrAssign):
                findings.extend(self.on_or_assign(context, node, ancestors))
            elif isinstance(node, DefinedCheck):
                findings.extend(self.on_defined(context, node, ancestors))
        logger.debug(
            "%s: %d finding(s) with style=%s",
            context.path,
            len(findings),
            self.policy.style.value,
        )
        return findings
