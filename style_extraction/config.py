"""
Configuration constants for stylesheet metadata extraction.

Defines the tree-sitter-css node type strings used for class and import
extraction.
"""

from typing import FrozenSet, Tuple

# Class selector structure; pseudo-class names are also aliased to
# class_name, so the parent type must be checked.
CLASS_SELECTOR: str = "class_selector"
CLASS_NAME: str = "class_name"

# @import directive and its target forms
IMPORT_STATEMENT: str = "import_statement"
STRING_VALUE: str = "string_value"
CALL_EXPRESSION: str = "call_expression"
FUNCTION_NAME: str = "function_name"
ARGUMENTS_NODE: str = "arguments"
PLAIN_VALUE: str = "plain_value"
URL_FUNCTION: str = "url"

COMMENT_NODE: str = "comment"

QUOTE_CHARS: FrozenSet[str] = frozenset({'"', "'"})

# Stylesheet extensions picked up by directory discovery (wxss/acss/ttss dialects)
STYLE_EXTENSIONS: Tuple[str, ...] = (".css", ".wxss", ".acss", ".ttss", ".qss")
