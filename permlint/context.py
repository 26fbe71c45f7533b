# Per-file analysis context: store file path, source code, AST, and helper methods.
# Handles reading/parsing Java files, error handling for unreadable/malformed files,
# and logging of node/type counts so ASTs are ready for rules.

import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from permlint.parser import create_parser, parse_bytes

logger = logging.getLogger(__name__)

# Node types that introduce a named type (and can carry annotations and methods)
TYPE_DECLARATION_TYPES = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
    }
)


def _count_nodes(node: TSNode) -> int:
    """Count all descendants of node (including node itself)."""
    count = 1
    for child in node.children:
        count += _count_nodes(child)
    return count


def _count_types(root: TSNode) -> int:
    """Count type declaration nodes under root, nested ones included."""
    count = 0
    if root.type in TYPE_DECLARATION_TYPES:
        count += 1
    for child in root.children:
        count += _count_types(child)
    return count


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """
    Return (total node count, type declaration count) for the tree.

    Useful for logging how much was parsed.
    """
    return _count_nodes(root), _count_types(root)


class FileContext:
    """
    Per-file state for static analysis: path, raw source bytes, and AST.

    Rules use context.path, context.source, and context.tree. Use
    get_source_span(context, node) and get_line_col(node) for locations/snippets.
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

    @property
    def root_node(self) -> TSNode:
        """Convenience access to the AST root."""
        return self.tree.root_node


def get_source_span(context: FileContext, node: TSNode) -> str:
    """
    Return the substring of context.source for the given node's byte range.

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


def get_end_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """Return (line, column) for the node's end position."""
    row, col = node.end_point
    if one_based:
        return row + 1, col + 1
    return row, col


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
) -> Optional[FileContext]:
    """
    Read a Java file and parse it into a FileContext (path, source, AST).

    - Unreadable file (permission, missing): returns None and logs error.
    - Malformed Java (syntax errors): still returns a FileContext with the tree
      and sets has_parse_errors=True; logs a warning and node/type counts.
    - Success: returns FileContext and logs node count and type count.
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

    node_count, type_count = count_tree_stats(tree.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d type declaration(s)%s",
        path,
        node_count,
        type_count,
        " (with parse errors)" if has_errors else "",
    )

    return FileContext(
        path=path,
        source=source,
        tree=tree,
        has_parse_errors=has_errors,
    )
