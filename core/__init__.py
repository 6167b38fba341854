"""Core shared contracts and utilities."""

from core.errors import (
    BatchCancelledError,
    InputContractError,
    MetaExtractionError,
    ModuleKindAmbiguityError,
    SourceNotFoundError,
    SourceSyntaxError,
)
from core.source_location import LineIndex, Position, Span
from core.path_contract import canonical_path, resolve_import_path
from core.structured_logging import (
    batch_scope,
    configure_structured_logging,
    get_batch_id,
    phase_scope,
)
from core.startup_config import (
    ConfigValidationError,
    ExtractionSettings,
    load_extraction_settings,
    resolve_strict_config_validation,
)
from core.run_artifacts import build_batch_report, write_run_report

__all__ = [
    "BatchCancelledError",
    "InputContractError",
    "MetaExtractionError",
    "ModuleKindAmbiguityError",
    "SourceNotFoundError",
    "SourceSyntaxError",
    "LineIndex",
    "Position",
    "Span",
    "canonical_path",
    "resolve_import_path",
    "batch_scope",
    "configure_structured_logging",
    "get_batch_id",
    "phase_scope",
    "ConfigValidationError",
    "ExtractionSettings",
    "load_extraction_settings",
    "resolve_strict_config_validation",
    "build_batch_report",
    "write_run_report",
]
