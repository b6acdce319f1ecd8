# Depth-first traversal over the syntax model. The ancestor path is passed
# down explicitly; nodes hold no parent references.

from __future__ import annotations

from typing import Iterator, Optional, Tuple, Type, TypeVar

from memolint.syntax.nodes import Node, children

Ancestors = Tuple[Node, ...]

T = TypeVar("T")


def walk(node: Node, ancestors: Ancestors = ()) -> Iterator[Tuple[Node, Ancestors]]:
    """
    Yield (node, ancestors) for node and every descendant in document order.

    ancestors runs from the root down to the node's parent.
    """
    yield node, ancestors
    path = ancestors + (node,)
    for child in children(node):
        yield from walk(child, path)


def nearest_ancestor(ancestors: Ancestors, *types: Type[T]) -> Optional[T]:
    """Return the closest ancestor that is an instance of one of types."""
    for ancestor in reversed(ancestors):
        if isinstance(ancestor, types):
            return ancestor  # type: ignore[return-value]
    return None
