# Lowering: convert a tree-sitter Ruby tree into the memolint syntax model.
# Only the shapes the memoization rule consumes get dedicated variants;
# everything else becomes Opaque with its named children lowered.

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from tree_sitter import Node as TSNode
from tree_sitter import Tree

from memolint.syntax.nodes import (
    Conditional,
    DefinedCheck,
    InstanceVariable,
    IvarAssign,
    MethodDef,
    Node,
    Opaque,
    OrAssign,
    Program,
    Return,
    Sequence,
    Span,
)

logger = logging.getLogger(__name__)

# Extras that tree-sitter attaches anywhere in the tree; never statements.
_IGNORED_TYPES = frozenset({"comment", "heredoc_body", "uninterpreted"})


def span_of(node: TSNode) -> Span:
    """Span for a tree-sitter node (tree-sitter points are 0-based)."""
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return Span(
        start_byte=node.start_byte,
        end_byte=node.end_byte,
        line=start_row + 1,
        column=start_col + 1,
        end_line=end_row + 1,
        end_column=end_col + 1,
    )


def _same_node(a: Optional[TSNode], b: TSNode) -> bool:
    if a is None:
        return False
    return (a.type, a.start_byte, a.end_byte) == (b.type, b.start_byte, b.end_byte)


def _operator(node: TSNode) -> Optional[TSNode]:
    """The operator token of an operator_assignment or unary node."""
    operator = node.child_by_field_name("operator")
    if operator is not None:
        return operator
    for child in node.children:
        if not child.is_named:
            return child
    return None


class _Lowerer:
    def __init__(self, source: bytes) -> None:
        self.source = source

    def text(self, node: TSNode) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def named(self, node: TSNode) -> List[TSNode]:
        return [c for c in node.named_children if c.type not in _IGNORED_TYPES]

    def statements(self, nodes: Iterable[TSNode]) -> List[Node]:
        return [self.lower(n) for n in nodes if n.type not in _IGNORED_TYPES]

    def body(self, nodes: Iterable[TSNode]) -> Optional[Node]:
        """Collapse a statement list: none -> None, one -> itself, more -> Sequence."""
        stmts = self.statements(nodes)
        if not stmts:
            return None
        if len(stmts) == 1:
            return stmts[0]
        first, last = stmts[0].span, stmts[-1].span
        span = Span(
            start_byte=first.start_byte,
            end_byte=last.end_byte,
            line=first.line,
            column=first.column,
            end_line=last.end_line,
            end_column=last.end_column,
        )
        return Sequence(statements=stmts, span=span)

    def branch(self, node: Optional[TSNode]) -> Optional[Node]:
        """Lower a `then`/`else`/`elsif` clause of a conditional."""
        if node is None:
            return None
        if node.type == "elsif":
            return self.conditional(node)
        return self.body(self.named(node))

    def lower(self, node: TSNode) -> Node:
        kind = node.type
        if kind == "program":
            return Program(statements=self.statements(node.named_children), span=span_of(node))
        if kind in ("method", "singleton_method"):
            return self.method(node)
        if kind == "instance_variable":
            return InstanceVariable(name=self.text(node), span=span_of(node))
        if kind == "assignment":
            left = node.child_by_field_name("left")
            if left is not None and left.type == "instance_variable":
                right = node.child_by_field_name("right")
                return IvarAssign(
                    name=self.text(left),
                    value=self.lower(right) if right is not None else None,
                    span=span_of(node),
                    name_span=span_of(left),
                )
        if kind == "operator_assignment":
            operator = _operator(node)
            left = node.child_by_field_name("left")
            if operator is not None and operator.type == "||=" and left is not None:
                right = node.child_by_field_name("right")
                return OrAssign(
                    target=self.lower(left),
                    value=self.lower(right) if right is not None else None,
                    span=span_of(node),
                )
        if kind in ("if", "unless", "elsif"):
            return self.conditional(node)
        if kind in ("if_modifier", "unless_modifier"):
            body = node.child_by_field_name("body")
            condition = node.child_by_field_name("condition")
            if body is not None and condition is not None:
                lowered = self.lower(body)
                if kind == "if_modifier":
                    then_branch, else_branch = lowered, None
                else:
                    then_branch, else_branch = None, lowered
                return Conditional(
                    condition=self.lower(condition),
                    then_branch=then_branch,
                    else_branch=else_branch,
                    span=span_of(node),
                )
        if kind == "unary":
            operator = _operator(node)
            if operator is not None and operator.type == "defined?":
                return self.defined(node)
        if kind == "return":
            return self.return_(node)
        return Opaque(kind=kind, span=span_of(node), children=self.statements(node.named_children))

    def method(self, node: TSNode) -> MethodDef:
        name_node = node.child_by_field_name("name")
        body_node = node.child_by_field_name("body")
        if body_node is None:
            # Grammars without a body field put statements directly under the method.
            skip = [
                name_node,
                node.child_by_field_name("parameters"),
                node.child_by_field_name("object"),
            ]
            stmts = [c for c in self.named(node) if not any(_same_node(s, c) for s in skip)]
        elif body_node.type == "body_statement":
            stmts = self.named(body_node)
        else:
            # Endless method: `def foo = expr`
            stmts = [body_node]
        name_span = span_of(name_node) if name_node is not None else span_of(node)
        return MethodDef(
            name=self.text(name_node) if name_node is not None else "",
            body=self.body(stmts),
            span=span_of(node),
            name_span=name_span,
            singleton=node.type == "singleton_method",
        )

    def conditional(self, node: TSNode) -> Node:
        condition = node.child_by_field_name("condition")
        if condition is None:
            return Opaque(kind=node.type, span=span_of(node), children=self.statements(node.named_children))
        consequence = self.branch(node.child_by_field_name("consequence"))
        alternative = self.branch(node.child_by_field_name("alternative"))
        if node.type == "unless":
            consequence, alternative = alternative, consequence
        return Conditional(
            condition=self.lower(condition),
            then_branch=consequence,
            else_branch=alternative,
            span=span_of(node),
        )

    def defined(self, node: TSNode) -> DefinedCheck:
        operand = node.child_by_field_name("operand")
        if operand is not None and operand.type == "parenthesized_statements":
            inner = self.named(operand)
            if len(inner) == 1:
                operand = inner[0]
        return DefinedCheck(
            argument=self.lower(operand) if operand is not None else None,
            span=span_of(node),
        )

    def return_(self, node: TSNode) -> Return:
        values: List[TSNode] = []
        for child in self.named(node):
            if child.type == "argument_list":
                values.extend(self.named(child))
            else:
                values.append(child)
        if not values:
            value = None
        elif len(values) == 1:
            value = self.lower(values[0])
        else:
            # `return a, b` returns an array
            value = Opaque(
                kind="argument_list",
                span=Span(
                    start_byte=values[0].start_byte,
                    end_byte=values[-1].end_byte,
                    line=values[0].start_point[0] + 1,
                    column=values[0].start_point[1] + 1,
                    end_line=values[-1].end_point[0] + 1,
                    end_column=values[-1].end_point[1] + 1,
                ),
                children=self.statements(values),
            )
        return Return(value=value, span=span_of(node))


def lower_tree(tree: Tree, source: bytes) -> Program:
    """
    Lower a whole tree-sitter parse tree into a Program.

    Error nodes produced for malformed input are kept as Opaque("ERROR") so
    the rest of the file is still analysed.
    """
    program = _Lowerer(source).lower(tree.root_node)
    if not isinstance(program, Program):
        # Root is always `program` for the Ruby grammar; wrap anything else.
        program = Program(statements=[program], span=program.span)
    logger.debug("Lowered tree: %d top-level statement(s)", len(program.statements))
    return program
