"""
High-level entry points for stylesheet metadata extraction.
"""

import logging
from typing import Optional, Union

from tree_sitter import Tree

from core.source_location import LineIndex
from core.source_io import ensure_well_formed
from style_extraction.models import CssMeta
from style_extraction.parser import parse_bytes, parse_file
from style_extraction.traversal import extract_class_names, extract_import_paths

logger = logging.getLogger(__name__)


def extract_css_meta(tree: Tree, source_bytes: bytes, file_path: str = "<source>") -> CssMeta:
    """Build the ``CssMeta`` snapshot of a parsed stylesheet."""
    line_index = LineIndex(source_bytes)
    meta = CssMeta(
        classes=extract_class_names(tree.root_node, line_index),
        imports=extract_import_paths(tree.root_node, line_index),
    )
    logger.info(
        "Extracted %d classes and %d imports from %s",
        len(meta.classes),
        len(meta.imports),
        file_path,
    )
    return meta


def extract_style_source(
    source: Union[str, bytes], file_path: Optional[str] = None
) -> CssMeta:
    """Parse and extract metadata from in-memory stylesheet text.

    Raises:
        SourceSyntaxError: If the text is not valid CSS.
    """
    file_path = file_path or "<source>"
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    tree = parse_bytes(source_bytes)
    ensure_well_formed(tree, file_path)
    return extract_css_meta(tree, source_bytes, file_path)


def extract_style_file(file_path: str) -> CssMeta:
    """Extract class and import metadata from a stylesheet on disk.

    Raises:
        SourceNotFoundError: If the file does not exist or cannot be read.
        SourceSyntaxError: If the stylesheet is not valid CSS.
    """
    tree, source_bytes = parse_file(file_path)
    return extract_css_meta(tree, source_bytes, file_path)
