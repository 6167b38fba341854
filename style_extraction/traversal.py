"""
AST traversal for stylesheet metadata.

Collects class selector tokens and ``@import`` targets from anywhere in a
stylesheet, including rule blocks nested in at-rules such as ``@media``.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from core.source_location import LineIndex
from style_extraction.config import (
    ARGUMENTS_NODE,
    CALL_EXPRESSION,
    CLASS_NAME,
    CLASS_SELECTOR,
    COMMENT_NODE,
    FUNCTION_NAME,
    IMPORT_STATEMENT,
    PLAIN_VALUE,
    QUOTE_CHARS,
    STRING_VALUE,
    URL_FUNCTION,
)
from style_extraction.models import ClassNameMeta

logger = logging.getLogger(__name__)


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order walk over named nodes in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def extract_class_names(root: Node, line_index: LineIndex) -> Tuple[ClassNameMeta, ...]:
    """Emit one ``ClassNameMeta`` per class token, in source order.

    A compound selector ``.a.b`` yields ``a`` then ``b``, each spanning only
    its own name token.
    """
    classes: List[ClassNameMeta] = []
    for node in iter_nodes(root):
        if node.type != CLASS_NAME:
            continue
        if node.parent is None or node.parent.type != CLASS_SELECTOR:
            continue
        classes.append(ClassNameMeta(name=line_index.text(node), span=line_index.span(node)))
    return tuple(classes)


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text


def import_target(import_node: Node, line_index: LineIndex) -> Optional[str]:
    """Raw target of an ``@import`` directive, or ``None`` if unrecognised."""
    values = [child for child in import_node.named_children if child.type != COMMENT_NODE]
    if not values:
        return None
    value = values[0]
    if value.type == STRING_VALUE:
        return _strip_quotes(line_index.text(value))
    if value.type == CALL_EXPRESSION:
        function_name = None
        arguments = None
        for child in value.named_children:
            if child.type == FUNCTION_NAME:
                function_name = line_index.text(child)
            elif child.type == ARGUMENTS_NODE:
                arguments = child
        if function_name is None or function_name.lower() != URL_FUNCTION or arguments is None:
            return None
        for argument in arguments.named_children:
            if argument.type == STRING_VALUE:
                return _strip_quotes(line_index.text(argument))
            if argument.type == PLAIN_VALUE:
                return line_index.text(argument)
    return None


def extract_import_paths(root: Node, line_index: LineIndex) -> Tuple[str, ...]:
    """Collect ``@import`` targets verbatim, in declaration order."""
    imports: List[str] = []
    for node in iter_nodes(root):
        if node.type != IMPORT_STATEMENT:
            continue
        target = import_target(node, line_index)
        if target is None:
            logger.debug("Unrecognised @import form at line %d", node.start_point.row + 1)
            continue
        imports.append(target)
    return tuple(imports)
