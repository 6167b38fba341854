"""
Tests for batch/coordinator.py

Covers input validation, per-file failure isolation, statistics and the
stylesheet import closure.
"""

import threading
import unittest
from pathlib import Path

from core.errors import BatchCancelledError, InputContractError
from core.path_contract import canonical_path
from core.startup_config import ExtractionSettings
from core.structured_logging import get_batch_id
from batch.coordinator import (
    BatchStats,
    VisitedPaths,
    discover_source_files,
    run_script_batch,
    run_style_batch,
    validate_paths,
)
from script_extraction.models import ComponentMeta, PageMeta


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCRIPTS = FIXTURES_DIR / "scripts"
STYLES = FIXTURES_DIR / "styles"


class TestValidatePaths(unittest.TestCase):
    """Test the batch input contract."""

    def test_rejects_non_lists(self):
        for bad in ("a.js", b"a.js", {"a.js": 1}, None, 3):
            with self.assertRaises(InputContractError):
                validate_paths(bad)

    def test_rejects_non_path_items(self):
        with self.assertRaises(InputContractError):
            validate_paths(["a.js", 1])

    def test_dedupes_in_order(self):
        self.assertEqual(validate_paths(("b.js", "a.js", "b.js")), ["b.js", "a.js"])

    def test_accepts_path_objects(self):
        self.assertEqual(validate_paths([Path("x") / "a.js"]), [str(Path("x") / "a.js")])

    def test_contract_error_is_type_error(self):
        with self.assertRaises(TypeError):
            run_script_batch("a.js")


class TestBatchStats(unittest.TestCase):
    """Test BatchStats."""

    def test_to_dict_and_str(self):
        stats = BatchStats()
        stats.files_requested = 3
        stats.files_extracted = 2
        self.assertEqual(stats.to_dict()["files_requested"], 3)
        self.assertIn("extracted=2", str(stats))


class TestVisitedPaths(unittest.TestCase):
    """Test the claim-before-parse set."""

    def test_claim_once(self):
        visited = VisitedPaths()
        self.assertTrue(visited.claim(str(STYLES / "app.css")))
        self.assertFalse(visited.claim(str(STYLES / "partials" / ".." / "app.css")))
        self.assertEqual(len(visited), 1)

    def test_concurrent_claims(self):
        visited = VisitedPaths()
        wins = []

        def worker():
            if visited.claim(str(STYLES / "app.css")):
                wins.append(1)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(wins), 1)


class TestScriptBatch(unittest.TestCase):
    """Test run_script_batch."""

    def test_failures_are_omitted(self):
        tabs = str(SCRIPTS / "tabs.js")
        index = str(SCRIPTS / "index.js")
        paths = [tabs, index, str(SCRIPTS / "broken.js"), str(SCRIPTS / "plain.js"),
                 str(SCRIPTS / "missing.js")]
        result = run_script_batch(paths)

        self.assertEqual(set(result.metas), {tabs, index})
        self.assertIsInstance(result.metas[tabs], ComponentMeta)
        self.assertIsInstance(result.metas[index], PageMeta)
        self.assertEqual(
            sorted(result.omitted),
            sorted(paths[2:]),
        )
        stats = result.stats.to_dict()
        self.assertEqual(stats["files_requested"], 5)
        self.assertEqual(stats["files_extracted"], 2)
        self.assertEqual(stats["syntax_errors"], 1)
        self.assertEqual(stats["files_unrecognized"], 1)
        self.assertEqual(stats["files_missing"], 1)
        self.assertEqual(stats["files_failed"], 0)

    def test_kind_hint_applies_to_every_file(self):
        tabs = str(SCRIPTS / "tabs.js")
        index = str(SCRIPTS / "index.js")
        result = run_script_batch([tabs, index], kind="page")
        self.assertEqual(list(result.metas), [index])

    def test_matches_single_file_extraction(self):
        from script_extraction.extractor import extract_script_file

        tabs = str(SCRIPTS / "tabs.js")
        result = run_script_batch([tabs], settings=ExtractionSettings(max_workers=1))
        self.assertEqual(result.metas[tabs], extract_script_file(tabs))

    def test_empty_input(self):
        result = run_script_batch([])
        self.assertEqual(result.metas, {})
        self.assertEqual(result.stats.files_requested, 0)

    def test_batch_context_is_scoped(self):
        result = run_script_batch([str(SCRIPTS / "tabs.js")])
        self.assertNotEqual(result.batch_id, "-")
        self.assertEqual(get_batch_id(), "-")

    def test_cancelled_before_start(self):
        cancel = threading.Event()
        cancel.set()
        with self.assertRaises(BatchCancelledError):
            run_script_batch([str(SCRIPTS / "tabs.js")], cancel_event=cancel)


class TestStyleBatch(unittest.TestCase):
    """Test run_style_batch and the import closure."""

    def test_cycle_terminates_with_closure(self):
        app = str(STYLES / "app.css")
        result = run_style_batch([app])

        base = canonical_path(str(STYLES / "partials" / "base.css"))
        theme = canonical_path(str(STYLES / "partials" / "theme.css"))
        self.assertEqual(set(result.metas), {app, base, theme})
        self.assertEqual(result.metas[app].imports, ("partials/base.css", "partials/theme.css"))
        self.assertEqual([c.name for c in result.metas[theme].classes], ["theme-dark"])
        self.assertEqual(result.stats.imports_followed, 2)
        self.assertEqual(result.stats.files_extracted, 3)

    def test_requested_file_is_not_parsed_twice(self):
        app = str(STYLES / "app.css")
        base = str(STYLES / "partials" / "base.css")
        result = run_style_batch([app, base])
        theme = canonical_path(str(STYLES / "partials" / "theme.css"))
        self.assertEqual(set(result.metas), {app, base, theme})
        self.assertEqual(result.stats.imports_followed, 1)

    def test_broken_and_absent_imports(self):
        entry = str(STYLES / "broken-import.css")
        result = run_style_batch([entry])
        self.assertEqual(list(result.metas), [entry])
        self.assertEqual(result.stats.syntax_errors, 1)
        self.assertEqual(result.omitted, [canonical_path(str(STYLES / "partials" / "bad.css"))])

    def test_imports_not_followed_when_disabled(self):
        app = str(STYLES / "app.css")
        result = run_style_batch([app], settings=ExtractionSettings(follow_css_imports=False))
        self.assertEqual(list(result.metas), [app])
        self.assertEqual(result.stats.imports_followed, 0)

    def test_missing_requested_file(self):
        result = run_style_batch([str(STYLES / "nope.css")])
        self.assertEqual(result.metas, {})
        self.assertEqual(result.stats.files_missing, 1)

    def test_rejects_string_input(self):
        with self.assertRaises(InputContractError):
            run_style_batch(str(STYLES / "app.css"))


class TestDiscoverSourceFiles(unittest.TestCase):
    """Test directory discovery."""

    def test_discovers_by_extension(self):
        found = discover_source_files(str(STYLES), (".css",))
        names = [Path(p).name for p in found]
        self.assertEqual(
            names,
            ["app.css", "broken-import.css", "bad.css", "base.css", "theme.css"],
        )
        self.assertTrue(all(Path(p).is_absolute() for p in found))

    def test_no_matches(self):
        self.assertEqual(discover_source_files(str(SCRIPTS), (".css",)), [])


if __name__ == "__main__":
    unittest.main()
