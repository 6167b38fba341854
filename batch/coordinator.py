"""
Batch coordinator for script and stylesheet extraction.

Fans a list of file paths out over a bounded thread pool, isolates per-file
failures and aggregates a mapping from path to metadata. Files that are
missing, unreadable, syntactically broken or unrecognised are omitted from
the mapping; no partial document is ever stored.

For stylesheets the coordinator also walks the import closure: every
``@import`` target is resolved against its importer and parsed once, keyed
by its canonical absolute path.
"""

import contextvars
import logging
import os
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from core.errors import (
    BatchCancelledError,
    InputContractError,
    MetaExtractionError,
    SourceNotFoundError,
    SourceSyntaxError,
)
from core.path_contract import canonical_path, resolve_import_path
from core.startup_config import ExtractionSettings
from core.structured_logging import batch_scope, phase_scope
from script_extraction.extractor import KindHint, extract_script_file
from script_extraction.models import ModuleKind, ScriptMeta
from style_extraction.extractor import extract_style_file
from style_extraction.models import CssMeta

logger = logging.getLogger(__name__)

MetaT = TypeVar("MetaT")


class BatchStats:
    """Statistics for a batch extraction."""

    def __init__(self):
        self.files_requested = 0
        self.files_extracted = 0
        self.files_missing = 0
        self.syntax_errors = 0
        self.files_unrecognized = 0
        self.files_failed = 0
        self.imports_followed = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_requested": self.files_requested,
            "files_extracted": self.files_extracted,
            "files_missing": self.files_missing,
            "syntax_errors": self.syntax_errors,
            "files_unrecognized": self.files_unrecognized,
            "files_failed": self.files_failed,
            "imports_followed": self.imports_followed,
        }

    def __str__(self) -> str:
        return (
            f"BatchStats(requested={self.files_requested}, "
            f"extracted={self.files_extracted}, missing={self.files_missing}, "
            f"syntax_errors={self.syntax_errors}, "
            f"unrecognized={self.files_unrecognized}, failed={self.files_failed}, "
            f"imports_followed={self.imports_followed})"
        )


@dataclass
class BatchResult(Generic[MetaT]):
    """Outcome of one batch call."""

    metas: Dict[str, MetaT]
    stats: BatchStats
    omitted: List[str] = field(default_factory=list)
    batch_id: str = "-"


@dataclass
class _FileOutcome(Generic[MetaT]):
    path: str
    meta: Optional[MetaT] = None
    error: Optional[BaseException] = None


class VisitedPaths:
    """Thread-safe set of canonical paths claimed for parsing."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seen: set[str] = set()

    def claim(self, path: str) -> bool:
        """Atomically mark ``path`` as visited; ``False`` if it already was."""
        key = canonical_path(path)
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)


def validate_paths(file_paths: object) -> List[str]:
    """Check the batch input contract and return de-duplicated paths.

    Raises:
        InputContractError: If ``file_paths`` is not a list/tuple of paths.
    """
    if isinstance(file_paths, (str, bytes)) or not isinstance(file_paths, (list, tuple)):
        raise InputContractError(
            f"file paths should be a list, got {type(file_paths).__name__}"
        )
    paths: List[str] = []
    for item in file_paths:
        if not isinstance(item, (str, os.PathLike)):
            raise InputContractError(
                f"file paths should contain strings, got {type(item).__name__}"
            )
        path = os.fspath(item)
        if path not in paths:
            paths.append(path)
    return paths


_SKIPPED_DIRS = frozenset({"node_modules", "dist", "output", "__pycache__", "miniprogram_npm"})


def discover_source_files(directory: str, extensions: Sequence[str]) -> List[str]:
    """Recursively discover source files with the given extensions.

    Hidden directories and dependency/build output directories are skipped.

    Returns:
        Sorted list of absolute paths.

    Example:
        >>> discover_source_files("miniprogram/components", (".js",))
        ['/abs/miniprogram/components/tabs/tabs.js', ...]
    """
    found = []
    directory = os.path.abspath(directory)
    logger.info(f"Discovering {'/'.join(extensions)} files in {directory}")

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith(".") and d not in _SKIPPED_DIRS]
        for name in files:
            if os.path.splitext(name)[1] in extensions:
                found.append(os.path.join(root, name))

    logger.info(f"Found {len(found)} files")
    return sorted(found)


def _run_guarded(path: str, extract: Callable[[str], Optional[MetaT]]) -> _FileOutcome[MetaT]:
    """Run one extraction; every failure is captured, never raised."""
    try:
        return _FileOutcome(path=path, meta=extract(path))
    except MetaExtractionError as e:
        return _FileOutcome(path=path, error=e)
    except Exception as e:
        logger.error(f"Unexpected error processing {path}: {e}", exc_info=True)
        return _FileOutcome(path=path, error=e)


def _record(outcome: _FileOutcome, result: BatchResult, key: str) -> bool:
    """Fold one outcome into the result; ``True`` when metadata was stored."""
    stats = result.stats
    error = outcome.error
    if error is None and outcome.meta is not None:
        result.metas[key] = outcome.meta
        stats.files_extracted += 1
        return True

    result.omitted.append(key)
    if error is None:
        stats.files_unrecognized += 1
        logger.info("No recognizable metadata in %s; omitted", key)
    elif isinstance(error, SourceNotFoundError):
        stats.files_missing += 1
        logger.warning("File not found: %s; omitted", key)
    elif isinstance(error, SourceSyntaxError):
        stats.syntax_errors += 1
        logger.warning("Syntax error in %s; omitted", key)
    else:
        stats.files_failed += 1
        logger.warning("Extraction failed for %s: %s; omitted", key, error)
    return False


def _submit(executor: ThreadPoolExecutor, path: str, extract) -> Future:
    # Each task runs in a copy of the caller's context so log records keep
    # the batch id and phase.
    ctx = contextvars.copy_context()
    return executor.submit(ctx.run, _run_guarded, path, extract)


def _check_cancelled(cancel_event: Optional[threading.Event], pending: Dict[Future, str]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        for future in pending:
            future.cancel()
        raise BatchCancelledError("batch cancelled; unstarted files were not scheduled")


def run_script_batch(
    file_paths: Sequence[str],
    kind: KindHint = None,
    settings: Optional[ExtractionSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BatchResult[ScriptMeta]:
    """Extract script metadata for many files concurrently.

    Args:
        file_paths: List of script paths. Result keys are the paths as given.
        kind: Module kind hint applied to every file, or ``None`` to detect.
        settings: Extraction settings (pool size, passes).
        cancel_event: When set, unstarted work is cancelled and
            ``BatchCancelledError`` is raised.

    Raises:
        ValueError: If ``kind`` is not a known module kind.
        InputContractError: If ``file_paths`` is not a list of paths.
        BatchCancelledError: If ``cancel_event`` is set during the batch.
    """
    paths = validate_paths(file_paths)
    settings = settings or ExtractionSettings()
    kind = ModuleKind.from_hint(kind)

    def extract(path: str) -> Optional[ScriptMeta]:
        return extract_script_file(path, kind=kind, settings=settings)

    with batch_scope() as batch_id, phase_scope("script"):
        result: BatchResult[ScriptMeta] = BatchResult(
            metas={}, stats=BatchStats(), batch_id=batch_id
        )
        result.stats.files_requested = len(paths)
        if not paths:
            return result

        logger.info("Extracting script metadata from %d files", len(paths))
        with ThreadPoolExecutor(max_workers=settings.resolved_workers()) as executor:
            pending = {_submit(executor, path, extract): path for path in paths}
            _check_cancelled(cancel_event, pending)
            for future in as_completed(pending):
                outcome = future.result()
                _record(outcome, result, pending[future])
                _check_cancelled(cancel_event, pending)

        logger.info(f"Script batch complete: {result.stats}")
        return result


def run_style_batch(
    file_paths: Sequence[str],
    settings: Optional[ExtractionSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BatchResult[CssMeta]:
    """Extract stylesheet metadata for many files and their import closure.

    Requested files are keyed by the path as given; files reached only
    through ``@import`` are keyed by their canonical absolute path. Each
    canonical path is parsed at most once, so import cycles terminate.

    Raises:
        InputContractError: If ``file_paths`` is not a list of paths.
        BatchCancelledError: If ``cancel_event`` is set during the batch.
    """
    paths = validate_paths(file_paths)
    settings = settings or ExtractionSettings()
    visited = VisitedPaths()

    with batch_scope() as batch_id, phase_scope("style"):
        result: BatchResult[CssMeta] = BatchResult(
            metas={}, stats=BatchStats(), batch_id=batch_id
        )
        result.stats.files_requested = len(paths)
        if not paths:
            return result

        logger.info("Extracting style metadata from %d files", len(paths))
        with ThreadPoolExecutor(max_workers=settings.resolved_workers()) as executor:
            pending: Dict[Future, str] = {}
            for path in paths:
                if visited.claim(path):
                    pending[_submit(executor, path, extract_style_file)] = path

            while pending:
                _check_cancelled(cancel_event, pending)
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    key = pending.pop(future)
                    outcome = future.result()
                    if not _record(outcome, result, key) or not settings.follow_css_imports:
                        continue
                    for target in outcome.meta.imports:
                        resolved = resolve_import_path(outcome.path, target)
                        if resolved is None:
                            logger.debug("Import %r from %s not resolvable; skipped", target, key)
                            continue
                        if visited.claim(resolved):
                            result.stats.imports_followed += 1
                            pending[_submit(executor, resolved, extract_style_file)] = resolved

        logger.info(f"Style batch complete: {result.stats}")
        return result
