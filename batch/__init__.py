"""
Batch extraction over many scripts or stylesheets.
"""

from batch.api import parse_css, parse_css_files, parse_script, parse_script_files, to_document
from batch.coordinator import (
    BatchResult,
    BatchStats,
    VisitedPaths,
    discover_source_files,
    run_script_batch,
    run_style_batch,
    validate_paths,
)

__all__ = [
    "parse_script",
    "parse_script_files",
    "parse_css",
    "parse_css_files",
    "to_document",
    "BatchResult",
    "BatchStats",
    "VisitedPaths",
    "discover_source_files",
    "run_script_batch",
    "run_style_batch",
    "validate_paths",
]
