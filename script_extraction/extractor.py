"""
High-level entry points for script metadata extraction.

This module turns a parsed component/page module into a ``ComponentMeta``
or ``PageMeta`` snapshot. The mandatory ``data``/``properties``/``methods``
passes run first; the event pass is an isolated enrichment step.
"""

import logging
from typing import Callable, Dict, Optional, Union

from tree_sitter import Tree

from core.source_location import LineIndex
from core.startup_config import ExtractionSettings
from script_extraction.config import DATA_KEY, METHODS_KEY, PROPERTIES_KEY
from script_extraction.events import scan_trigger_events
from script_extraction.models import ComponentMeta, ModuleKind, PageMeta, ScriptMeta
from script_extraction.parser import ensure_well_formed, parse_bytes, parse_file
from script_extraction.traversal import (
    RegistrationCall,
    extract_data_meta,
    extract_methods_meta,
    extract_properties_meta,
    find_object_property,
    find_registration_call,
)

logger = logging.getLogger(__name__)

KindHint = Union[ModuleKind, str, None]


def _extract_data(
    call: RegistrationCall, line_index: LineIndex, settings: ExtractionSettings
):
    data_object = find_object_property(call.options, DATA_KEY, line_index)
    if data_object is None:
        return ()
    return extract_data_meta(data_object, line_index, settings.max_data_depth)


def _build_page_meta(
    call: RegistrationCall, line_index: LineIndex, settings: ExtractionSettings
) -> PageMeta:
    # Page handlers live directly on the options object.
    return PageMeta(
        data=_extract_data(call, line_index, settings),
        methods=extract_methods_meta(call.options, line_index),
    )


def _build_component_meta(
    call: RegistrationCall, line_index: LineIndex, settings: ExtractionSettings
) -> ComponentMeta:
    properties = ()
    properties_object = find_object_property(call.options, PROPERTIES_KEY, line_index)
    if properties_object is not None:
        properties = extract_properties_meta(properties_object, line_index)

    methods = ()
    methods_object = find_object_property(call.options, METHODS_KEY, line_index)
    if methods_object is not None:
        methods = extract_methods_meta(methods_object, line_index)

    events = None
    if settings.scan_events:
        events = ()
        if methods_object is not None:
            try:
                events = tuple(
                    scan_trigger_events(
                        methods_object, line_index, settings.event_trigger_method
                    )
                )
            except Exception as e:
                logger.warning("Event scan failed, omitting events: %s", e)
                events = None

    return ComponentMeta(
        data=_extract_data(call, line_index, settings),
        methods=methods,
        properties=properties,
        events=events,
    )


_VARIANT_BUILDERS: Dict[
    ModuleKind, Callable[[RegistrationCall, LineIndex, ExtractionSettings], ScriptMeta]
] = {
    ModuleKind.PAGE: _build_page_meta,
    ModuleKind.COMPONENT: _build_component_meta,
}


def extract_module_meta(
    tree: Tree,
    source_bytes: bytes,
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
    file_path: str = "<source>",
) -> Optional[ScriptMeta]:
    """Extract metadata from an already parsed module.

    Args:
        tree: Parsed tree of ``source_bytes``.
        source_bytes: The module source.
        kind: Explicit module kind (``ModuleKind`` or ``"component"``/``"page"``).
            ``None`` detects it from the registration calls present.
        settings: Extraction settings; defaults apply when omitted.
        file_path: Used for logging and error messages.

    Returns:
        ``ComponentMeta`` or ``PageMeta``, or ``None`` when no registration
        call is found.

    Raises:
        ModuleKindAmbiguityError: If ``kind`` is omitted and both kinds are registered.
    """
    settings = settings or ExtractionSettings()
    line_index = LineIndex(source_bytes)
    call = find_registration_call(
        tree.root_node,
        line_index,
        kind=ModuleKind.from_hint(kind),
        settings=settings,
        file_path=file_path,
    )
    if call is None:
        logger.info("No registration call found in %s", file_path)
        return None

    meta = _VARIANT_BUILDERS[call.kind](call, line_index, settings)
    logger.info(
        "Extracted %s metadata from %s (%d data, %d methods)",
        call.kind.value,
        file_path,
        len(meta.data),
        len(meta.methods),
    )
    return meta


def extract_script_source(
    source: Union[str, bytes],
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
    file_path: str = "<source>",
) -> Optional[ScriptMeta]:
    """Parse and extract metadata from in-memory source text.

    Raises:
        SourceSyntaxError: If the source is not valid JavaScript.
    """
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    tree = parse_bytes(source_bytes)
    ensure_well_formed(tree, file_path)
    return extract_module_meta(tree, source_bytes, kind, settings, file_path)


def extract_script_file(
    file_path: str,
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
) -> Optional[ScriptMeta]:
    """Extract metadata from a component/page script on disk.

    Example:
        >>> meta = extract_script_file("components/tabs/tabs.js")
        >>> meta.kind
        <ModuleKind.COMPONENT: 'Component'>

    Raises:
        SourceNotFoundError: If the file does not exist or cannot be read.
        SourceSyntaxError: If the file is not valid JavaScript.
        ModuleKindAmbiguityError: If ``kind`` is omitted and both kinds are registered.
    """
    tree, source_bytes = parse_file(file_path)
    return extract_module_meta(tree, source_bytes, kind, settings, file_path)
