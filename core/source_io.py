"""Source reading and syntax checks shared by the script and style parsers."""

import logging

from tree_sitter import Node, Tree

from core.errors import SourceNotFoundError, SourceSyntaxError

logger = logging.getLogger(__name__)


def read_source(file_path: str) -> bytes:
    """Read a source file, mapping I/O failures to ``SourceNotFoundError``.

    Raises:
        SourceNotFoundError: If the file is missing, a directory, or unreadable.
    """
    try:
        with open(file_path, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        logger.debug(f"File not found: {file_path}")
        raise SourceNotFoundError(file_path) from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise SourceNotFoundError(file_path, reason=str(e)) from e


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a tree."""
    if not tree.root_node.has_error:
        return 0

    count = 0
    stack: list[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        # Only descend into subtrees that actually carry errors.
        stack.extend(child for child in node.children if child.has_error)
    return count


def ensure_well_formed(tree: Tree, file_path: str) -> None:
    """Raise ``SourceSyntaxError`` when the tree contains error nodes."""
    if tree.root_node.has_error:
        error_count = count_error_nodes(tree)
        logger.warning(
            "File %s contains syntax errors (%d error nodes)", file_path, error_count
        )
        raise SourceSyntaxError(file_path, error_count)
