"""Path identity contract shared by the style extractor and batch layer.

Import targets are resolved relative to the importing file, and every file
reached through an import is identified by its canonical absolute path so
that cyclic and diamond imports collapse onto a single key.
"""

from __future__ import annotations

import os
from typing import Optional

_URL_SCHEMES = ("http://", "https://", "//", "data:")


def canonical_path(path: str) -> str:
    """Absolute, symlink-free form of ``path`` used as a visited-set key."""
    return os.path.realpath(os.path.abspath(path))


def is_remote_import(target: str) -> bool:
    return target.strip().lower().startswith(_URL_SCHEMES)


def resolve_import_path(importer_path: str, target: str) -> Optional[str]:
    """Resolve an ``@import`` target against the importing file's directory.

    Returns:
        Canonical absolute path of the target, or ``None`` when the target
        is remote or does not exist on disk.
    """
    if not target or is_remote_import(target):
        return None
    base_dir = os.path.dirname(canonical_path(importer_path))
    candidate = canonical_path(os.path.join(base_dir, target))
    if not os.path.isfile(candidate):
        return None
    return candidate
