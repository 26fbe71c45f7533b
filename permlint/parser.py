# Tree-sitter setup and AST parsing: parse Java source code into AST trees.

import logging
from typing import Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter_java import language as _java_language_capsule

logger = logging.getLogger(__name__)

# Java language grammar: wrap tree-sitter-java capsule for use with tree_sitter.Parser
_JAVA_LANGUAGE = Language(_java_language_capsule())


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for Java."""
    return tree_sitter.Parser(_JAVA_LANGUAGE)


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse Java source bytes into an AST.

    Args:
        source: UTF-8 encoded Java source code.
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
