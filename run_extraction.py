#!/usr/bin/env python3
"""
Command-line entry point for mini-program metadata extraction.

Runs a script or stylesheet batch over the given files and writes the
resulting path-to-metadata mapping as a JSON document. A batch report with
per-run statistics is written alongside for operational tracing.

Usage:
    python run_extraction.py script components/tabs/tabs.js pages/index/index.js
    python run_extraction.py script pages/index/index.js --kind page --output out/pages.json
    python run_extraction.py css styles/app.css --config extraction.yaml --verbose
"""

import argparse
import json
import logging
import os
import sys
import time

from batch.api import to_document
from batch.coordinator import discover_source_files, run_script_batch, run_style_batch
from core.errors import InputContractError
from core.run_artifacts import build_batch_report, write_run_report
from core.startup_config import ConfigValidationError, load_extraction_settings
from core.structured_logging import configure_structured_logging
from script_extraction.config import SCRIPT_EXTENSIONS
from style_extraction.config import STYLE_EXTENSIONS

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Mini-program component, page and stylesheet metadata extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_extraction.py script components/tabs/tabs.js\n"
            "  python run_extraction.py css styles/app.css --output out/styles.json\n"
        )
    )

    parser.add_argument(
        "mode",
        choices=["script", "css"],
        help="Which extractor to run over the files."
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Source files or directories to extract from."
    )
    parser.add_argument(
        "--kind",
        choices=["component", "page"],
        default=None,
        help="Module kind for script files. Detected per file when omitted."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML settings file."
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Path for the JSON document. Printed to stdout when omitted."
    )
    parser.add_argument(
        "--report-dir",
        default="output/batch_reports",
        help="Directory for batch reports. Default: output/batch_reports"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging."
    )

    return parser.parse_args(argv)


def expand_inputs(inputs, extensions) -> list:
    """Replace directory arguments with the matching source files beneath them."""
    paths = []
    for item in inputs:
        if os.path.isdir(item):
            paths.extend(discover_source_files(item, extensions))
        else:
            paths.append(item)
    return paths


def write_document(document: dict, output_file) -> None:
    """Write the JSON document to ``output_file`` or stdout."""
    text = json.dumps(document, indent=2, ensure_ascii=False)
    if output_file is None:
        sys.stdout.write(text + "\n")
        return
    directory = os.path.dirname(os.path.abspath(output_file))
    os.makedirs(directory, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    logger.info(f"Wrote metadata for {len(document)} files to {output_file}")


def main(argv=None) -> int:
    """Main entry point; returns the process exit code."""
    args = parse_args(argv)
    configure_structured_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = load_extraction_settings(args.config)

        extensions = SCRIPT_EXTENSIONS if args.mode == "script" else STYLE_EXTENSIONS
        files = expand_inputs(args.files, extensions)

        t0 = time.time()
        if args.mode == "script":
            result = run_script_batch(files, kind=args.kind, settings=settings)
        else:
            result = run_style_batch(files, settings=settings)
        elapsed = time.time() - t0
        logger.info("Extraction completed in %.2fs: %s", elapsed, result.stats)

        write_document(to_document(result.metas), args.output)

        report = build_batch_report(args.mode, result.stats.to_dict(), result.omitted)
        report["elapsed_seconds"] = round(elapsed, 3)
        report_path = write_run_report(report, result.batch_id, args.report_dir)
        logger.info(f"Batch report: {report_path}")

    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except InputContractError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except Exception as e:
        logger.error(f"Extraction failed: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
