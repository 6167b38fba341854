"""
AST traversal and classification logic for mini-program script modules.

This module locates the ``Component({...})`` / ``Page({...})`` registration
call in a parsed module and classifies the ``data``, ``properties`` and
``methods`` sections of its options object.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from core.errors import ModuleKindAmbiguityError
from core.source_location import LineIndex
from core.startup_config import DEFAULT_MAX_DATA_DEPTH, ExtractionSettings
from script_extraction.config import (
    ARGUMENTS_NODE,
    CALL_EXPRESSION,
    COMMENT_NODE,
    COMPONENT_MARKER_KEYS,
    COMPONENT_REGISTRAR,
    DESCRIPTOR_TYPE_KEY,
    DESCRIPTOR_VALUE_KEY,
    ESCAPE_SEQUENCE,
    EXPRESSION_STATEMENT,
    FALSE_NODE,
    FUNCTION_NODE_TYPES,
    GETTER_KEYWORD,
    IDENTIFIER,
    METHOD_DEFINITION,
    MIN_MARKER_KEYS,
    NULL_NODE,
    NUMBER_NODE,
    OBJECT_NODE,
    PAGE_MARKER_KEYS,
    PAGE_REGISTRAR,
    PAIR_NODE,
    PARENTHESIZED_EXPRESSION,
    PROPERTY_IDENTIFIER,
    SETTER_KEYWORD,
    SHORTHAND_PROPERTY,
    SIMPLE_ESCAPES,
    STRING_FRAGMENT,
    STRING_NODE,
    TEMPLATE_STRING,
    TEMPLATE_SUBSTITUTION,
    TRUE_NODE,
    TYPE_CONSTRUCTORS,
    UNARY_EXPRESSION,
)
from script_extraction.models import (
    DataMeta,
    MethodMeta,
    ModuleKind,
    PropertyMeta,
    PropertyType,
    PropertyValue,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationCall:
    """A top-level registration call and its options object literal."""

    kind: ModuleKind
    callee: str
    options: Node


# ---------------------------------------------------------------------------
# Generic node helpers
# ---------------------------------------------------------------------------


def code_children(node: Node) -> List[Node]:
    """Named children of ``node`` with comments filtered out."""
    return [child for child in node.named_children if child.type != COMMENT_NODE]


def get_leading_comment(node: Node, line_index: LineIndex) -> Optional[str]:
    """Return the leading comment attached to ``node``, delimiters included.

    Walks backward over the run of comments directly preceding ``node``.
    A comment that starts on the same line where the previous sibling ends
    is that sibling's trailing comment and is ignored. When several
    comments lead the node, the first one in source order is returned.
    """
    run: List[Node] = []
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == COMMENT_NODE:
        run.append(sibling)
        sibling = sibling.prev_named_sibling

    if not run:
        return None

    if sibling is not None:
        boundary_row = sibling.end_point.row
    elif node.parent is not None and node.parent.parent is not None:
        # The opening brace of the enclosing block/object.
        boundary_row = node.parent.start_point.row
    else:
        boundary_row = -1

    for comment in reversed(run):
        if comment.start_point.row != boundary_row:
            return line_index.text(comment)
    return None


def unescape_sequence(sequence: str) -> str:
    """Decode a JavaScript escape sequence such as ``\\n`` or ``\\u0041``."""
    body = sequence[1:]
    if not body:
        return ""
    if body in SIMPLE_ESCAPES:
        return SIMPLE_ESCAPES[body]
    if body[0] in "\r\n\u2028\u2029":
        # Line continuation
        return ""
    try:
        if body.startswith("u{") and body.endswith("}"):
            return chr(int(body[2:-1], 16))
        if body[0] in "ux" and len(body) > 1:
            return chr(int(body[1:], 16))
    except ValueError:
        pass
    return body


def string_literal_value(node: Node, line_index: LineIndex) -> str:
    """Decoded content of a ``string`` or substitution-free template node."""
    parts = []
    for child in node.named_children:
        if child.type == STRING_FRAGMENT:
            parts.append(line_index.text(child))
        elif child.type == ESCAPE_SEQUENCE:
            parts.append(unescape_sequence(line_index.text(child)))
    if parts or node.named_child_count:
        return "".join(parts)
    # Grammar versions without fragment children
    return line_index.text(node)[1:-1]


_LEGACY_OCTAL = re.compile(r"0[0-7]+")


def number_literal_value(text: str) -> PropertyValue:
    """Convert a JavaScript numeric literal to ``int`` or ``float``.

    Literals too large for a double come back as ``inf``.
    """
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        cleaned = cleaned[:-1]
    lowered = cleaned.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        return int(cleaned, 0)
    if _LEGACY_OCTAL.fullmatch(cleaned):
        return int(cleaned, 8)
    try:
        return int(cleaned)
    except ValueError:
        return float(cleaned)


def format_number_key(text: str) -> str:
    """Normalize a numeric object key the way JavaScript stringifies it."""
    try:
        value = number_literal_value(text)
    except ValueError:
        return text
    if isinstance(value, float) and math.isinf(value):
        return "Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_plain_template(node: Node) -> bool:
    return node.type == TEMPLATE_STRING and not any(
        child.type == TEMPLATE_SUBSTITUTION for child in node.named_children
    )


def property_key_name(key: Optional[Node], line_index: LineIndex) -> Optional[str]:
    """Name of an object key, or ``None`` for computed/private keys."""
    if key is None:
        return None
    if key.type in (PROPERTY_IDENTIFIER, SHORTHAND_PROPERTY):
        return line_index.text(key)
    if key.type == STRING_NODE:
        return string_literal_value(key, line_index)
    if key.type == NUMBER_NODE:
        return format_number_key(line_index.text(key))
    return None


def entry_key(entry: Node) -> Optional[Node]:
    """Key node of an object literal entry (pair, method or shorthand)."""
    if entry.type == PAIR_NODE:
        return entry.child_by_field_name("key")
    if entry.type == METHOD_DEFINITION:
        return entry.child_by_field_name("name")
    if entry.type == SHORTHAND_PROPERTY:
        return entry
    return None


def method_accessor(entry: Node) -> Optional[str]:
    """Return ``"get"``/``"set"`` for accessor methods, else ``None``."""
    for child in entry.children:
        if not child.is_named and child.type in (GETTER_KEYWORD, SETTER_KEYWORD):
            return child.type
    return None


def is_function_node(node: Optional[Node]) -> bool:
    return node is not None and node.type in FUNCTION_NODE_TYPES


def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == PARENTHESIZED_EXPRESSION:
        inner = code_children(node)
        node = inner[0] if inner else None
    return node


def find_property_value(
    object_node: Node, name: str, line_index: LineIndex
) -> Optional[Node]:
    """Value node of the first ``name: value`` pair in an object literal."""
    for entry in code_children(object_node):
        if entry.type != PAIR_NODE:
            continue
        key = entry.child_by_field_name("key")
        if key is None or key.type not in (PROPERTY_IDENTIFIER, STRING_NODE):
            continue
        if property_key_name(key, line_index) == name:
            return entry.child_by_field_name("value")
    return None


def find_object_property(
    object_node: Node, name: str, line_index: LineIndex
) -> Optional[Node]:
    """Like :func:`find_property_value` but only when the value is an object literal."""
    value = find_property_value(object_node, name, line_index)
    if value is not None and value.type == OBJECT_NODE:
        return value
    return None


def literal_value(node: Optional[Node], line_index: LineIndex) -> Optional[PropertyValue]:
    """Echo a boolean/number/string literal; ``None`` for anything richer.

    Non-finite numbers are not echoed.
    """
    value = _raw_literal_value(node, line_index)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _raw_literal_value(node: Optional[Node], line_index: LineIndex) -> Optional[PropertyValue]:
    node = unwrap_parentheses(node)
    if node is None:
        return None
    if node.type == TRUE_NODE:
        return True
    if node.type == FALSE_NODE:
        return False
    if node.type == NUMBER_NODE:
        return number_literal_value(line_index.text(node))
    if node.type == STRING_NODE or is_plain_template(node):
        return string_literal_value(node, line_index)
    if node.type == UNARY_EXPRESSION:
        operator = node.child_by_field_name("operator")
        argument = unwrap_parentheses(node.child_by_field_name("argument"))
        if (
            operator is not None
            and argument is not None
            and argument.type == NUMBER_NODE
            and operator.type in ("-", "+")
        ):
            value = number_literal_value(line_index.text(argument))
            return -value if operator.type == "-" else value
    return None


def literal_shape_type(node: Optional[Node], line_index: LineIndex) -> PropertyType:
    """Classify a value expression by its literal shape."""
    node = unwrap_parentheses(node)
    if node is None:
        return PropertyType.OBJECT
    if node.type == IDENTIFIER and line_index.text(node) in TYPE_CONSTRUCTORS:
        return PropertyType(line_index.text(node))
    value = _raw_literal_value(node, line_index)
    if isinstance(value, bool):
        return PropertyType.BOOLEAN
    if isinstance(value, (int, float)):
        return PropertyType.NUMBER
    if isinstance(value, str):
        return PropertyType.STRING
    return PropertyType.OBJECT


# ---------------------------------------------------------------------------
# Registration call recognition
# ---------------------------------------------------------------------------


def first_argument(call: Node) -> Optional[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != ARGUMENTS_NODE:
        return None
    args = code_children(arguments)
    return args[0] if args else None


def count_marker_keys(object_node: Node, kind: ModuleKind, line_index: LineIndex) -> int:
    markers = COMPONENT_MARKER_KEYS if kind is ModuleKind.COMPONENT else PAGE_MARKER_KEYS
    count = 0
    for entry in code_children(object_node):
        key = entry_key(entry)
        if key is not None and key.type in (PROPERTY_IDENTIFIER, SHORTHAND_PROPERTY):
            if line_index.text(key) in markers:
                count += 1
    return count


def unwrap_wrapped_options(
    kind: ModuleKind, call: Node, line_index: LineIndex
) -> Optional[Node]:
    """Find options passed through wrappers, e.g. ``Page(wrap(mixin({...})))``.

    The innermost object literal is accepted only when it carries at least
    ``MIN_MARKER_KEYS`` keys typical for the registration kind.
    """
    node: Optional[Node] = call
    while node is not None and node.type == CALL_EXPRESSION:
        node = first_argument(node)
        if node is not None and node.type == OBJECT_NODE:
            if count_marker_keys(node, kind, line_index) >= MIN_MARKER_KEYS:
                return node
            return None
    return None


def _registrar_kind(name: str, guess: bool) -> Tuple[Optional[ModuleKind], bool]:
    """Map a callee name to ``(kind, exact_match)``."""
    if name == COMPONENT_REGISTRAR:
        return ModuleKind.COMPONENT, True
    if name == PAGE_REGISTRAR:
        return ModuleKind.PAGE, True
    if guess and name.endswith(COMPONENT_REGISTRAR):
        return ModuleKind.COMPONENT, False
    if guess and name.endswith(PAGE_REGISTRAR):
        return ModuleKind.PAGE, False
    return None, False


def iter_registration_calls(
    root: Node,
    line_index: LineIndex,
    settings: Optional[ExtractionSettings] = None,
) -> Iterator[RegistrationCall]:
    """Yield registration calls found among the module's top-level statements."""
    settings = settings or ExtractionSettings()
    guess = settings.guess_wrapped_registrations

    for statement in root.named_children:
        if statement.type != EXPRESSION_STATEMENT:
            continue
        expressions = code_children(statement)
        if not expressions or expressions[0].type != CALL_EXPRESSION:
            continue
        call = expressions[0]
        callee = call.child_by_field_name("function")
        if callee is None or callee.type != IDENTIFIER:
            continue

        callee_name = line_index.text(callee)
        kind, exact = _registrar_kind(callee_name, guess)
        if kind is None:
            continue

        argument = first_argument(call)
        if argument is None:
            continue

        options: Optional[Node] = None
        if exact and argument.type == OBJECT_NODE:
            options = argument
        elif exact and guess and argument.type == CALL_EXPRESSION:
            options = unwrap_wrapped_options(kind, argument, line_index)
        elif not exact:
            options = unwrap_wrapped_options(kind, call, line_index)

        if options is None:
            logger.debug(
                "Skipping %s() call at line %d: no options object literal",
                callee_name,
                call.start_point.row + 1,
            )
            continue
        yield RegistrationCall(kind=kind, callee=callee_name, options=options)


def find_registration_call(
    root: Node,
    line_index: LineIndex,
    kind: Optional[ModuleKind] = None,
    settings: Optional[ExtractionSettings] = None,
    file_path: str = "<source>",
) -> Optional[RegistrationCall]:
    """Locate the registration call that drives extraction.

    Args:
        root: Root ``program`` node.
        line_index: Position index over the same source bytes.
        kind: Explicit module kind. When given, the first call of that kind
            wins. When omitted, the kind is detected from the calls present.
        settings: Extraction settings (wrapper guessing).
        file_path: Used in error messages only.

    Returns:
        The first matching call, or ``None`` when the module has none.

    Raises:
        ModuleKindAmbiguityError: If no kind is given and the module
            registers both a component and a page.
    """
    candidates = list(iter_registration_calls(root, line_index, settings))
    if kind is not None:
        for candidate in candidates:
            if candidate.kind is kind:
                return candidate
        return None

    kinds = {candidate.kind for candidate in candidates}
    if len(kinds) > 1:
        raise ModuleKindAmbiguityError(file_path)
    return candidates[0] if candidates else None


# ---------------------------------------------------------------------------
# Section classification
# ---------------------------------------------------------------------------


def extract_data_meta(
    data_object: Node,
    line_index: LineIndex,
    max_depth: int = DEFAULT_MAX_DATA_DEPTH,
    _depth: int = 1,
) -> Tuple[DataMeta, ...]:
    """Build the ``DataMeta`` tree mirroring a ``data`` object literal.

    Only object literal values are recursed into. Getters and shorthand
    entries are leaves; computed keys, spreads and setters are skipped.
    """
    nodes: List[DataMeta] = []
    for entry in code_children(data_object):
        if entry.type == METHOD_DEFINITION and method_accessor(entry) == SETTER_KEYWORD:
            continue
        key = entry_key(entry)
        name = property_key_name(key, line_index)
        if name is None:
            continue

        children: Optional[Tuple[DataMeta, ...]] = None
        if entry.type == PAIR_NODE:
            value = entry.child_by_field_name("value")
            if value is not None and value.type == OBJECT_NODE:
                if _depth >= max_depth:
                    logger.warning(
                        "Data nesting deeper than %d at line %d; not descending into '%s'",
                        max_depth,
                        key.start_point.row + 1,
                        name,
                    )
                else:
                    children = extract_data_meta(value, line_index, max_depth, _depth + 1)

        nodes.append(
            DataMeta(
                name=name,
                span=line_index.span(key),
                comment=get_leading_comment(entry, line_index),
                children=children,
            )
        )
    return tuple(nodes)


def classify_property(
    value: Optional[Node], line_index: LineIndex
) -> Tuple[PropertyType, Optional[PropertyValue]]:
    """Resolve ``(type, echoed value)`` for one ``properties`` entry value.

    A descriptor's ``type`` wins whenever it is present: known constructors
    map to their type, anything else (``Array``, ``[String, Number]``, a
    function) is ``Object``. Only a missing or ``null`` type falls back to
    the shape of ``value``.
    """
    if value is not None and value.type == OBJECT_NODE:
        type_node = unwrap_parentheses(
            find_property_value(value, DESCRIPTOR_TYPE_KEY, line_index)
        )
        default_node = find_property_value(value, DESCRIPTOR_VALUE_KEY, line_index)
        if type_node is None or type_node.type == NULL_NODE:
            if default_node is not None:
                prop_type = literal_shape_type(default_node, line_index)
            else:
                prop_type = PropertyType.OBJECT
        elif (
            type_node.type == IDENTIFIER
            and line_index.text(type_node) in TYPE_CONSTRUCTORS
        ):
            prop_type = PropertyType(line_index.text(type_node))
        else:
            prop_type = PropertyType.OBJECT
        return prop_type, literal_value(default_node, line_index)

    if is_function_node(value):
        return PropertyType.OBJECT, None
    return literal_shape_type(value, line_index), literal_value(value, line_index)


def extract_properties_meta(
    properties_object: Node, line_index: LineIndex
) -> Tuple[PropertyMeta, ...]:
    """Classify every named entry of a component's ``properties`` literal."""
    properties: List[PropertyMeta] = []
    for entry in code_children(properties_object):
        if entry.type == METHOD_DEFINITION and method_accessor(entry) is not None:
            continue
        key = entry_key(entry)
        name = property_key_name(key, line_index)
        if name is None:
            continue

        if entry.type == PAIR_NODE:
            prop_type, value = classify_property(
                entry.child_by_field_name("value"), line_index
            )
        elif entry.type == SHORTHAND_PROPERTY:
            prop_type, value = classify_property(entry, line_index)
        else:
            prop_type, value = PropertyType.OBJECT, None

        properties.append(
            PropertyMeta(
                name=name,
                span=line_index.span(key),
                type=prop_type,
                value=value,
                comment=get_leading_comment(entry, line_index),
            )
        )
    return tuple(properties)


def iter_function_entries(object_node: Node) -> Iterator[Tuple[Node, Node]]:
    """Yield ``(entry, function_node)`` for function-valued entries.

    Method shorthand (including async and generator forms) yields the
    ``method_definition`` itself; accessors and non-function values are skipped.
    """
    for entry in code_children(object_node):
        if entry.type == METHOD_DEFINITION:
            if method_accessor(entry) is None:
                yield entry, entry
        elif entry.type == PAIR_NODE:
            value = unwrap_parentheses(entry.child_by_field_name("value"))
            if is_function_node(value):
                yield entry, value


def extract_methods_meta(object_node: Node, line_index: LineIndex) -> Tuple[MethodMeta, ...]:
    """Emit a ``MethodMeta`` for every function-valued entry of an object literal."""
    methods: List[MethodMeta] = []
    for entry, _ in iter_function_entries(object_node):
        key = entry_key(entry)
        name = property_key_name(key, line_index)
        if name is None:
            continue
        methods.append(
            MethodMeta(
                name=name,
                span=line_index.span(key),
                comment=get_leading_comment(entry, line_index),
            )
        )
    return tuple(methods)
