# Per-file analysis context: store file path, source code, AST, and helper methods.
# Handles reading/parsing Ruby files, error handling for unreadable/malformed files,
# and logging of node/method counts. The lowered syntax model is built on demand.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from memolint.findings.models import Location
from memolint.parser import create_parser, parse_bytes
from memolint.syntax.lowering import lower_tree
from memolint.syntax.nodes import Program, Span

logger = logging.getLogger(__name__)

METHOD_NODE_TYPES = frozenset({"method", "singleton_method"})


def _count_nodes(node: TSNode) -> int:
    """Count all descendants of node (including node itself)."""
    count = 1
    for child in node.children:
        count += _count_nodes(child)
    return count


def _count_methods(root: TSNode) -> int:
    """Count method and singleton_method nodes under root."""
    count = 0
    if root.type in METHOD_NODE_TYPES:
        count += 1
    for child in root.children:
        count += _count_methods(child)
    return count


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """Return (total node count, method definition count) for the tree."""
    return _count_nodes(root), _count_methods(root)


class FileContext:
    """
    Per-file state for static analysis: path, raw source bytes, and AST.

    Rules use context.path, context.source and context.program (the lowered
    syntax model). Use location_for(context, span) to turn a node span into
    a finding Location.
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        tree: Tree,
        *,
        has_parse_errors: bool = False,
    ) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.has_parse_errors = has_parse_errors
        self._program: Optional[Program] = None

    @property
    def root_node(self) -> TSNode:
        """Convenience access to the AST root."""
        return self.tree.root_node

    @property
    def program(self) -> Program:
        """The syntax model for this file, lowered once on first access."""
        if self._program is None:
            self._program = lower_tree(self.tree, self.source)
        return self._program


def get_source_span(context: FileContext, node: TSNode | Span) -> str:
    """
    Return the substring of context.source for a tree-sitter node or Span.

    Decodes with errors="replace" so bad UTF-8 does not crash.
    """
    return context.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def get_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """
    Return (line, column) for the node's start position.

    Tree-sitter uses 0-based (row, col). If one_based=True (default),
    returns 1-based line and column for display.
    """
    row, col = node.start_point
    if one_based:
        return row + 1, col + 1
    return row, col


def location_for(context: FileContext, span: Span) -> Location:
    """Build a finding Location for span, with the covered source as snippet."""
    return Location(
        path=context.path,
        line=span.line,
        column=span.column,
        end_line=span.end_line,
        end_column=span.end_column,
        snippet=get_source_span(context, span),
    )


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
) -> Optional[FileContext]:
    """
    Read a Ruby file and parse it into a FileContext (path, source, AST).

    - Unreadable file (permission, missing): returns None and logs error.
    - Malformed Ruby (syntax errors): still returns a FileContext with the tree
      and sets has_parse_errors=True; logs a warning and node/method counts.
    - Success: returns FileContext and logs node count and method count.
    """
    if parser is None:
        parser = create_parser()

    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    tree = parse_bytes(source, parser=parser)
    has_errors = tree.root_node.has_error
    if has_errors:
        logger.warning("File %s parsed with syntax errors; AST may be incomplete", path)

    node_count, method_count = count_tree_stats(tree.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d method(s)%s",
        path,
        node_count,
        method_count,
        " (with parse errors)" if has_errors else "",
    )

    return FileContext(
        path=path,
        source=source,
        tree=tree,
        has_parse_errors=has_errors,
    )


def load_contexts(
    paths: list[Path],
    parser: Optional[Parser] = None,
) -> list[FileContext]:
    """
    Read and parse multiple Ruby files into FileContexts.

    Unreadable or missing files are skipped (logged); malformed files still
    get a context with has_parse_errors=True. Order matches input order.
    """
    if parser is None:
        parser = create_parser()

    contexts: list[FileContext] = []
    for path in paths:
        ctx = create_context(path, parser=parser)
        if ctx is not None:
            contexts.append(ctx)
    return contexts
