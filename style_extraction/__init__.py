"""
Style metadata extraction.

Tree-sitter-based scanner for class selectors and ``@import`` directives
in mini-program stylesheets.
"""

from style_extraction.models import ClassNameMeta, CssMeta
from style_extraction.parser import create_parser, parse_bytes, parse_file
from style_extraction.traversal import extract_class_names, extract_import_paths
from style_extraction.extractor import (
    extract_css_meta,
    extract_style_file,
    extract_style_source,
)

__all__ = [
    "ClassNameMeta",
    "CssMeta",
    "create_parser",
    "parse_bytes",
    "parse_file",
    "extract_class_names",
    "extract_import_paths",
    "extract_css_meta",
    "extract_style_file",
    "extract_style_source",
]
