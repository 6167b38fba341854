"""
Tree-sitter parser initialization and stylesheet parsing utilities.
"""

import logging
from typing import Tuple

import tree_sitter_css as tscss
from tree_sitter import Language, Parser, Tree

from core.source_io import ensure_well_formed, read_source

logger = logging.getLogger(__name__)

# Module-level language constant
CSS_LANGUAGE = Language(tscss.language())


def create_parser() -> Parser:
    """Create a tree-sitter parser for CSS."""
    parser = Parser(CSS_LANGUAGE)
    logger.debug("Created tree-sitter CSS parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of stylesheet source.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> parse_bytes(b".a {}").root_node.type
        'stylesheet'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    logger.debug(f"Parsed {len(source)} bytes of CSS")
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a stylesheet from disk.

    Raises:
        SourceNotFoundError: If the file does not exist or cannot be read.
        SourceSyntaxError: If the stylesheet has error nodes.
    """
    source_bytes = read_source(file_path)
    tree = parse_bytes(source_bytes)
    ensure_well_formed(tree, file_path)
    logger.debug(f"Successfully parsed stylesheet: {file_path}")
    return tree, source_bytes
