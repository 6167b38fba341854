"""
Script metadata extraction.

Tree-sitter-based recognizer for mini-program ``Component({...})`` and
``Page({...})`` modules. Extracts data, properties, methods and triggered
events with their source locations and leading comments.
"""

from script_extraction.models import (
    ComponentMeta,
    DataMeta,
    EventMeta,
    MethodMeta,
    ModuleKind,
    PageMeta,
    PropertyMeta,
    PropertyType,
    ScriptMeta,
)
from script_extraction.parser import create_parser, parse_bytes, parse_file, count_error_nodes
from script_extraction.traversal import find_registration_call
from script_extraction.events import scan_trigger_events
from script_extraction.extractor import (
    extract_module_meta,
    extract_script_file,
    extract_script_source,
)

__all__ = [
    # Data models
    "ComponentMeta",
    "DataMeta",
    "EventMeta",
    "MethodMeta",
    "ModuleKind",
    "PageMeta",
    "PropertyMeta",
    "PropertyType",
    "ScriptMeta",
    # Low-level parsing
    "create_parser",
    "parse_bytes",
    "parse_file",
    "count_error_nodes",
    # Mid-level extraction
    "find_registration_call",
    "scan_trigger_events",
    # High-level entry points
    "extract_module_meta",
    "extract_script_file",
    "extract_script_source",
]
