"""
Advisory event pass: collect event names a component triggers.

Scans the function bodies declared under ``methods`` for calls of the form
``this.triggerEvent("name", ...)`` and records each distinct literal name
once, at its first occurrence. Names built from non-literal expressions
cannot be classified and are skipped.
"""

import logging
from typing import List, Optional, Set

from tree_sitter import Node

from core.source_location import LineIndex
from script_extraction.config import (
    CALL_EXPRESSION,
    EXPRESSION_STATEMENT,
    MEMBER_EXPRESSION,
    PROPERTY_IDENTIFIER,
    STRING_NODE,
    THIS_NODE,
)
from script_extraction.models import EventMeta
from script_extraction.traversal import (
    first_argument,
    get_leading_comment,
    is_plain_template,
    iter_function_entries,
    string_literal_value,
)

logger = logging.getLogger(__name__)


def _is_trigger_call(call: Node, trigger_method: str, line_index: LineIndex) -> bool:
    callee = call.child_by_field_name("function")
    if callee is None or callee.type != MEMBER_EXPRESSION:
        return False
    receiver = callee.child_by_field_name("object")
    member = callee.child_by_field_name("property")
    return (
        receiver is not None
        and receiver.type == THIS_NODE
        and member is not None
        and member.type == PROPERTY_IDENTIFIER
        and line_index.text(member) == trigger_method
    )


def _event_name(call: Node, line_index: LineIndex) -> Optional[str]:
    argument = first_argument(call)
    if argument is None:
        return None
    if argument.type == STRING_NODE or is_plain_template(argument):
        return string_literal_value(argument, line_index) or None
    return None


def _iter_calls(root: Node):
    """Pre-order walk yielding call expressions in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == CALL_EXPRESSION:
            yield node
        stack.extend(reversed(node.named_children))


def scan_trigger_events(
    methods_object: Node,
    line_index: LineIndex,
    trigger_method: str = "triggerEvent",
) -> List[EventMeta]:
    """Collect distinct triggered event names from a ``methods`` literal.

    Args:
        methods_object: The object literal under the ``methods`` key.
        line_index: Position index over the module source.
        trigger_method: Name of the event trigger method on ``this``.

    Returns:
        Events in order of first occurrence. The span covers the
        ``this.<trigger_method>`` callee; the comment is the one leading the
        enclosing expression statement, if any.
    """
    seen: Set[str] = set()
    events: List[EventMeta] = []

    for _, function_node in iter_function_entries(methods_object):
        for call in _iter_calls(function_node):
            if not _is_trigger_call(call, trigger_method, line_index):
                continue
            name = _event_name(call, line_index)
            if name is None:
                logger.debug(
                    "Skipping non-literal event name at line %d", call.start_point.row + 1
                )
                continue
            if name in seen:
                continue
            seen.add(name)

            comment = None
            if call.parent is not None and call.parent.type == EXPRESSION_STATEMENT:
                comment = get_leading_comment(call.parent, line_index)
            events.append(
                EventMeta(
                    name=name,
                    span=line_index.span(call.child_by_field_name("function")),
                    comment=comment,
                )
            )
    return events
