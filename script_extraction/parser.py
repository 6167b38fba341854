"""
Tree-sitter parser initialization and script file parsing utilities.

This module provides functions to initialize the JavaScript parser and parse
component/page source files.
"""

import logging
from typing import Tuple

import tree_sitter_javascript as tsjs
from tree_sitter import Language, Parser, Tree

from core.source_io import count_error_nodes, ensure_well_formed, read_source

logger = logging.getLogger(__name__)

# Module-level language constant
JS_LANGUAGE = Language(tsjs.language())


def create_parser() -> Parser:
    """Create a tree-sitter parser for JavaScript.

    Parsers are not shared between threads, so each parse call gets its own.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"Component({})")
    """
    parser = Parser(JS_LANGUAGE)
    logger.debug("Created tree-sitter JavaScript parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of JavaScript source code.

    Args:
        source: UTF-8 encoded bytes of a script module.

    Returns:
        The parsed tree. Syntax errors are left in the tree as ERROR/MISSING
        nodes; use :func:`ensure_well_formed` to reject them.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"Page({data: {}})")
        >>> tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    logger.debug(f"Parsed {len(source)} bytes of JavaScript")
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a script file from disk.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        SourceNotFoundError: If the file does not exist or cannot be read.
        SourceSyntaxError: If the file is not valid JavaScript.
    """
    source_bytes = read_source(file_path)
    tree = parse_bytes(source_bytes)
    ensure_well_formed(tree, file_path)
    logger.debug(f"Successfully parsed script: {file_path}")
    return tree, source_bytes
