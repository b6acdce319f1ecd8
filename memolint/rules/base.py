# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules subclass Rule and implement run().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from memolint.findings.models import Finding

if TYPE_CHECKING:
    from memolint.context import FileContext


class Rule(ABC):
    """
    Abstract base class for all static analysis rules.

    Subclasses must define:
    - id: str: unique rule identifier (e.g. "memoized-instance-variable-name")
    - name: str: human-readable rule name
    - run(context, config) -> list[Finding]: analyze one file and return findings

    The analyzer calls run() once per file; context holds path, source bytes,
    the tree-sitter tree and the lowered syntax model (context.program).
    Rules keep no state between calls.
    """

    id: str
    name: str

    @abstractmethod
    def run(self, context: FileContext, config: Any) -> list[Finding]:
        """
        Analyze one file and return any findings.

        Args:
            context: Per-file state. Walk context.program with
                     memolint.syntax.visitor.walk.
            config: Analyzer Config (may be None when a rule is run directly).

        Returns:
            List of Finding objects, empty if no issues.
        """
        ...
