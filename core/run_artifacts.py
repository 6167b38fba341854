"""Batch report artifacts for operational tracing of extraction runs."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping


def build_batch_report(
    phase: str,
    stats: Mapping[str, int],
    omitted_paths: Iterable[str] = (),
) -> dict[str, Any]:
    """Assemble the JSON payload describing one batch run."""
    return {
        "phase": phase,
        "stats": dict(stats),
        "omitted_paths": sorted(omitted_paths),
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
    }


def write_run_report(
    report: dict[str, Any],
    batch_id: str,
    output_dir: str = "output/batch_reports",
) -> str:
    """Write a batch report as ``<output_dir>/<batch_id>.json``; return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("batch_id", batch_id)
    path = os.path.join(output_dir, f"{batch_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True, ensure_ascii=False)
    return path
