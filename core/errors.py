"""Error taxonomy shared by the script and style extractors."""

from __future__ import annotations

from typing import Optional


class MetaExtractionError(Exception):
    """Base class for metadata extraction failures."""


class SourceNotFoundError(MetaExtractionError, FileNotFoundError):
    """Raised when a source file is missing or cannot be read."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        message = f"No such file {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class SourceSyntaxError(MetaExtractionError, ValueError):
    """Raised when the syntax tree of a source file contains error nodes."""

    def __init__(self, path: str, error_count: int) -> None:
        self.path = path
        self.error_count = error_count
        super().__init__(f"failed to parse {path} ({error_count} error nodes)")


class ModuleKindAmbiguityError(MetaExtractionError):
    """Raised when a module registers both a Component and a Page."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"{path} calls both Component() and Page() at top level; "
            "pass an explicit module kind"
        )


class InputContractError(MetaExtractionError, TypeError):
    """Raised when a batch call receives something other than a path list."""


class BatchCancelledError(MetaExtractionError):
    """Raised when a batch is cancelled before all files were scheduled."""
