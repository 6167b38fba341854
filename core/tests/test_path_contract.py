"""Tests for import path resolution."""

import os
import tempfile
import unittest
from pathlib import Path

from core.path_contract import canonical_path, is_remote_import, resolve_import_path


class TestPathContract(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        (self.root / "styles").mkdir()
        (self.root / "styles" / "base.css").write_text(".a {}\n", encoding="utf-8")
        (self.root / "app.css").write_text("@import 'styles/base.css';\n", encoding="utf-8")

    def test_resolve_relative_to_importer(self) -> None:
        resolved = resolve_import_path(str(self.root / "app.css"), "styles/base.css")
        self.assertEqual(resolved, canonical_path(str(self.root / "styles" / "base.css")))

    def test_resolve_parent_reference(self) -> None:
        importer = str(self.root / "styles" / "base.css")
        resolved = resolve_import_path(importer, "../app.css")
        self.assertEqual(resolved, canonical_path(str(self.root / "app.css")))

    def test_missing_target_is_none(self) -> None:
        self.assertIsNone(resolve_import_path(str(self.root / "app.css"), "nope.css"))

    def test_remote_targets(self) -> None:
        self.assertTrue(is_remote_import("https://cdn.example.com/x.css"))
        self.assertTrue(is_remote_import("//cdn.example.com/x.css"))
        self.assertFalse(is_remote_import("./local.css"))
        self.assertIsNone(resolve_import_path(str(self.root / "app.css"), "http://x/y.css"))

    def test_canonical_path_collapses_dots(self) -> None:
        messy = os.path.join(str(self.root), "styles", "..", "app.css")
        self.assertEqual(canonical_path(messy), canonical_path(str(self.root / "app.css")))


if __name__ == "__main__":
    unittest.main()
