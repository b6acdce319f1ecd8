# Tree-sitter setup and AST parsing: parse Ruby source code into AST trees.

import logging
from pathlib import Path
from typing import Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter_ruby import language as _ruby_language_capsule

logger = logging.getLogger(__name__)

# Ruby grammar: wrap tree-sitter-ruby capsule for use with tree_sitter.Parser
_RUBY_LANGUAGE = Language(_ruby_language_capsule())


def get_ruby_language() -> Language:
    """Return the Tree-sitter Language object for Ruby."""
    return _RUBY_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for Ruby."""
    parser = tree_sitter.Parser(_RUBY_LANGUAGE)
    return parser


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse Ruby source bytes into an AST.

    Args:
        source: UTF-8 encoded Ruby source code.
        parser: Optional parser instance; if None, a new one is created.

    Returns:
        The parse tree. Check tree.root_node for errors (e.g. ERROR nodes).
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(
            "Parse completed with errors: root=%s",
            tree.root_node.type,
        )
    else:
        logger.debug(
            "Parse succeeded: root=%s",
            tree.root_node.type,
        )
    return tree


def parse_file(path: Path, parser: Optional[tree_sitter.Parser] = None) -> Optional[tree_sitter.Tree]:
    """
    Parse a Ruby source file into an AST.

    Args:
        path: Path to the .rb file.
        parser: Optional parser instance; if None, a new one is created.

    Returns:
        The parse tree, or None if the file could not be read.
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None
    tree = parse_bytes(source, parser=parser)
    logger.info("Parsed file %s: success=%s", path, not tree.root_node.has_error)
    return tree
