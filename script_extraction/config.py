"""
Configuration constants for mini-program script metadata extraction.

Defines the tree-sitter-javascript node type strings and the registration
vocabulary (registrar identifiers, section keys, type constructors).
"""

from typing import Dict, FrozenSet, Tuple

# Registrar identifiers called at module top level
COMPONENT_REGISTRAR: str = "Component"
PAGE_REGISTRAR: str = "Page"

# Sections of the registration options object
DATA_KEY: str = "data"
PROPERTIES_KEY: str = "properties"
METHODS_KEY: str = "methods"

# Fields of a property descriptor object
DESCRIPTOR_TYPE_KEY: str = "type"
DESCRIPTOR_VALUE_KEY: str = "value"

# Type constructors recognised in property declarations; anything else is Object
TYPE_CONSTRUCTORS: FrozenSet[str] = frozenset({"Boolean", "Number", "String", "Object"})

# Keys whose presence marks an unwrapped object as registration options
COMPONENT_MARKER_KEYS: FrozenSet[str] = frozenset(
    {"properties", "data", "methods", "attached", "ready"}
)
PAGE_MARKER_KEYS: FrozenSet[str] = frozenset(
    {"data", "onInit", "onLoad", "onReady", "onShow"}
)
MIN_MARKER_KEYS: int = 2

# Top-level statement wrapping a registration call
EXPRESSION_STATEMENT: str = "expression_statement"
CALL_EXPRESSION: str = "call_expression"
MEMBER_EXPRESSION: str = "member_expression"
ARGUMENTS_NODE: str = "arguments"
IDENTIFIER: str = "identifier"
THIS_NODE: str = "this"

# Object literal structure
OBJECT_NODE: str = "object"
PAIR_NODE: str = "pair"
METHOD_DEFINITION: str = "method_definition"
SHORTHAND_PROPERTY: str = "shorthand_property_identifier"
COMMENT_NODE: str = "comment"

# Key node types that yield a metadata name
PROPERTY_IDENTIFIER: str = "property_identifier"
STRING_NODE: str = "string"
NUMBER_NODE: str = "number"

# Accessor keywords inside method_definition
GETTER_KEYWORD: str = "get"
SETTER_KEYWORD: str = "set"

# Function-valued expressions ("function" is the pre-0.21 grammar name)
FUNCTION_NODE_TYPES: FrozenSet[str] = frozenset(
    {
        "function_expression",
        "function",
        "arrow_function",
        "generator_function",
    }
)

# Literal node types echoed as property values
TRUE_NODE: str = "true"
FALSE_NODE: str = "false"
NULL_NODE: str = "null"
TEMPLATE_STRING: str = "template_string"
TEMPLATE_SUBSTITUTION: str = "template_substitution"
UNARY_EXPRESSION: str = "unary_expression"
PARENTHESIZED_EXPRESSION: str = "parenthesized_expression"

# String literal children
STRING_FRAGMENT: str = "string_fragment"
ESCAPE_SEQUENCE: str = "escape_sequence"

SIMPLE_ESCAPES: Dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

# Script file extensions picked up by directory discovery
SCRIPT_EXTENSIONS: Tuple[str, ...] = (".js", ".mjs", ".cjs")
