# Structural matching of the two memoization idioms inside a method body:
#
#   def foo                        def foo
#     helper = ...                   return @foo if defined?(@foo)
#     @foo ||= compute(helper)       ...
#   end                              @foo = compute
#                                  end

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from memolint.syntax.nodes import (
    Conditional,
    DefinedCheck,
    InstanceVariable,
    IvarAssign,
    MethodDef,
    Node,
    OrAssign,
    Return,
    Sequence,
)
from memolint.syntax.visitor import Ancestors, nearest_ancestor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodContext:
    """The method enclosing a memoization."""

    name: str
    node: MethodDef

    @property
    def is_initializer(self) -> bool:
        return self.node.is_initializer


@dataclass(frozen=True)
class OrAssignPattern:
    """`@var ||= value` as the whole method body or its last statement."""

    variable: InstanceVariable
    is_sole_or_final_statement: bool


@dataclass(frozen=True)
class DefinedGuardPattern:
    """
    `return @var if defined?(@var)` first, `@var = value` last.

    defined_check and return_node are the `@var` operands inside the guard;
    assign_node is the final assignment.
    """

    defined_check: InstanceVariable
    return_node: InstanceVariable
    assign_node: IvarAssign
    variable: str


MemoizationCandidate = Union[OrAssignPattern, DefinedGuardPattern]
Match = Tuple[MemoizationCandidate, MethodContext]


def enclosing_method(ancestors: Ancestors) -> Optional[MethodContext]:
    """Nearest enclosing instance or singleton method, or None at class/file level."""
    method = nearest_ancestor(ancestors, MethodDef)
    if method is None:
        return None
    return MethodContext(name=method.name, node=method)


def _is_body_final(method: MethodDef, node: Node) -> bool:
    body = method.body
    if body is node:
        return True
    return isinstance(body, Sequence) and body.statements[-1] is node


def match_or_assign(node: OrAssign, ancestors: Ancestors) -> Optional[Match]:
    """Match `@var ||= value` that ends its enclosing method."""
    if not isinstance(node.target, InstanceVariable):
        return None
    method = enclosing_method(ancestors)
    if method is None:
        return None
    if not _is_body_final(method.node, node):
        logger.debug(
            "Skipping %s ||= in %s: not the final statement",
            node.target.name,
            method.name,
        )
        return None
    return OrAssignPattern(variable=node.target, is_sole_or_final_statement=True), method


def _ivar_named(node: Optional[Node], name: str) -> Optional[InstanceVariable]:
    if isinstance(node, InstanceVariable) and node.name == name:
        return node
    return None


def match_defined_guard(node: DefinedCheck, ancestors: Ancestors) -> Optional[Match]:
    """
    Match the defined?-guard idiom starting from its `defined?(@var)` node.

    The guard must be the first statement of the method body, with no else
    branch, and the body must end with the only top-level assignment to the
    same variable. Anything else is not this idiom.
    """
    if not isinstance(node.argument, InstanceVariable):
        return None
    variable = node.argument.name

    method = enclosing_method(ancestors)
    if method is None:
        return None

    body = method.node.body
    if not isinstance(body, Sequence):
        return None
    guard, *rest = body.statements
    if not rest:
        return None
    if not isinstance(guard, Conditional) or guard.condition is not node:
        return None
    if guard.else_branch is not None or not isinstance(guard.then_branch, Return):
        return None
    return_ivar = _ivar_named(guard.then_branch.value, variable)
    if return_ivar is None:
        return None

    assign = rest[-1]
    if not isinstance(assign, IvarAssign) or assign.name != variable:
        return None
    if any(isinstance(stmt, IvarAssign) and stmt.name == variable for stmt in rest[:-1]):
        logger.debug("Skipping %s in %s: assigned more than once", variable, method.name)
        return None

    return (
        DefinedGuardPattern(
            defined_check=node.argument,
            return_node=return_ivar,
            assign_node=assign,
            variable=variable,
        ),
        method,
    )
