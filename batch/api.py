"""
Public entry points for single-file and batch metadata extraction.

Single-file calls raise ``SourceNotFoundError`` / ``SourceSyntaxError`` so
callers can tell an absent file from a broken one; batch calls swallow both
per file and omit the path from the returned mapping.
"""

import threading
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from core.startup_config import ExtractionSettings
from script_extraction.extractor import KindHint, extract_script_file
from script_extraction.models import ScriptMeta
from style_extraction.extractor import extract_style_file
from style_extraction.models import CssMeta
from batch.coordinator import run_script_batch, run_style_batch


def parse_script(
    path: str,
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
) -> Optional[ScriptMeta]:
    """Extract metadata from one component or page script.

    Returns:
        The module metadata, or ``None`` when the file holds no
        registration call.

    Raises:
        SourceNotFoundError: If the file is missing or unreadable.
        SourceSyntaxError: If the file is not valid JavaScript.
        ModuleKindAmbiguityError: If ``kind`` is omitted and both kinds are registered.
    """
    return extract_script_file(path, kind=kind, settings=settings)


def parse_script_files(
    paths: Sequence[str],
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, ScriptMeta]:
    """Extract script metadata for many files, keyed by the paths given.

    Raises:
        InputContractError: If ``paths`` is not a list of paths.
    """
    return run_script_batch(paths, kind=kind, settings=settings, cancel_event=cancel_event).metas


def parse_css(path: str) -> CssMeta:
    """Extract class and import metadata from one stylesheet.

    Imports are listed but not followed; use :func:`parse_css_files` for the
    import closure.
    """
    return extract_style_file(path)


def parse_css_files(
    paths: Sequence[str],
    settings: Optional[ExtractionSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, CssMeta]:
    """Extract stylesheet metadata for many files plus their import closure.

    Raises:
        InputContractError: If ``paths`` is not a list of paths.
    """
    return run_style_batch(paths, settings=settings, cancel_event=cancel_event).metas


def to_document(metas: Mapping[str, Union[ScriptMeta, CssMeta]]) -> Dict[str, Any]:
    """Serialize a batch mapping into plain JSON-compatible data."""
    return {path: meta.to_dict() for path, meta in metas.items()}
