# Syntax model consumed by rules: a closed set of node variants lowered from
# the tree-sitter Ruby tree (see memolint.syntax.lowering).

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass(frozen=True)
class Span:
    """Byte range plus 1-based start/end line and column of a node."""

    start_byte: int
    end_byte: int
    line: int
    column: int
    end_line: int
    end_column: int


# Nodes use identity equality (eq=False): two structurally equal statements
# at different places in a method are different nodes.


@dataclass(eq=False)
class Program:
    statements: List["Node"]
    span: Span


@dataclass(eq=False)
class MethodDef:
    """`def name ... end` or `def self.name ... end` (singleton=True)."""

    name: str
    body: Optional["Node"]
    span: Span
    name_span: Span
    singleton: bool = False

    @property
    def is_initializer(self) -> bool:
        return self.name == "initialize"


@dataclass(eq=False)
class InstanceVariable:
    """A read of `@name`. `name` keeps the sigil."""

    name: str
    span: Span


@dataclass(eq=False)
class IvarAssign:
    """Plain assignment `@name = value`; name_span covers the `@name` token."""

    name: str
    value: Optional["Node"]
    span: Span
    name_span: Span


@dataclass(eq=False)
class OrAssign:
    """`target ||= value`."""

    target: "Node"
    value: Optional["Node"]
    span: Span


@dataclass(eq=False)
class Conditional:
    """if/unless (block or modifier form); else_branch is None when absent."""

    condition: "Node"
    then_branch: Optional["Node"]
    else_branch: Optional["Node"]
    span: Span


@dataclass(eq=False)
class DefinedCheck:
    """`defined?(expr)`; parentheses around a single operand are dropped."""

    argument: Optional["Node"]
    span: Span


@dataclass(eq=False)
class Return:
    value: Optional["Node"]
    span: Span


@dataclass(eq=False)
class Sequence:
    """Two or more statements in a row."""

    statements: List["Node"]
    span: Span


@dataclass(eq=False)
class Opaque:
    """Any construct the rules do not inspect; kind is the tree-sitter type."""

    kind: str
    span: Span
    children: List["Node"] = field(default_factory=list)


Node = Union[
    Program,
    MethodDef,
    InstanceVariable,
    IvarAssign,
    OrAssign,
    Conditional,
    DefinedCheck,
    Return,
    Sequence,
    Opaque,
]


def _present(*nodes: Optional[Node]) -> List[Node]:
    return [n for n in nodes if n is not None]


def children(node: Node) -> List[Node]:
    """Return the direct child nodes of node in source order."""
    if isinstance(node, Program):
        return list(node.statements)
    if isinstance(node, MethodDef):
        return _present(node.body)
    if isinstance(node, InstanceVariable):
        return []
    if isinstance(node, IvarAssign):
        return _present(node.value)
    if isinstance(node, OrAssign):
        return _present(node.target, node.value)
    if isinstance(node, Conditional):
        return _present(node.condition, node.then_branch, node.else_branch)
    if isinstance(node, DefinedCheck):
        return _present(node.argument)
    if isinstance(node, Return):
        return _present(node.value)
    if isinstance(node, Sequence):
        return list(node.statements)
    if isinstance(node, Opaque):
        return list(node.children)
    raise TypeError(f"Unknown syntax node: {type(node).__name__}")


def statements_of(body: Optional[Node]) -> List[Node]:
    """Flatten a method body into its top-level statements."""
    if body is None:
        return []
    if isinstance(body, Sequence):
        return list(body.statements)
    return [body]


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield node and every descendant in document order (DFS)."""
    yield node
    for child in children(node):
        yield from iter_descendants(child)
