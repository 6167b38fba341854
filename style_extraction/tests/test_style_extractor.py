"""
Integration tests for style_extraction/extractor.py
"""

import unittest
from pathlib import Path

from core.errors import SourceNotFoundError, SourceSyntaxError
from style_extraction.extractor import extract_style_file, extract_style_source
from style_extraction.models import CssMeta


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestExtractStyleFile(unittest.TestCase):
    """Test extraction from stylesheet fixtures."""

    def test_component_css(self):
        meta = extract_style_file(str(FIXTURES_DIR / "component.css"))
        self.assertIsInstance(meta, CssMeta)
        self.assertEqual(
            [c.name for c in meta.classes],
            ["tabs", "tabs-nav", "active", "tabs-item", "tabs-item", "tabs-bar"],
        )
        self.assertEqual(meta.imports, ())

    def test_component_css_document(self):
        document = extract_style_file(str(FIXTURES_DIR / "component.css")).to_dict()
        self.assertEqual(
            document["classes"][0],
            {"name": "tabs", "loc": {"start": {"line": 1, "column": 1}, "end": {"line": 1, "column": 5}}},
        )
        locs = [(c["loc"]["start"]["line"], c["loc"]["start"]["column"]) for c in document["classes"]]
        self.assertEqual(locs, [(1, 1), (5, 1), (5, 10), (5, 19), (11, 5), (16, 8)])
        self.assertEqual(document["imports"], [])

    def test_import_css(self):
        meta = extract_style_file(str(FIXTURES_DIR / "import.css"))
        self.assertEqual(meta.imports, ("component.css", "page.css"))
        self.assertEqual([c.name for c in meta.classes], ["import-root"])

    def test_missing_file(self):
        with self.assertRaises(SourceNotFoundError) as ctx:
            extract_style_file(str(FIXTURES_DIR / "component-notfound.css"))
        self.assertIn("No such file", str(ctx.exception))

    def test_broken_file(self):
        with self.assertRaises(SourceSyntaxError):
            extract_style_file(str(FIXTURES_DIR / "broken.css"))

    def test_idempotent(self):
        path = str(FIXTURES_DIR / "cycle-b.css")
        self.assertEqual(extract_style_file(path), extract_style_file(path))


class TestExtractStyleSource(unittest.TestCase):
    """Test in-memory extraction."""

    def test_empty_stylesheet(self):
        meta = extract_style_source("")
        self.assertEqual(meta.to_dict(), {"classes": [], "imports": []})

    def test_character_columns(self):
        meta = extract_style_source("/* é */ .a {}")
        self.assertEqual(meta.classes[0].span.start.column, 9)

    def test_legacy_hack_fails_whole_stylesheet(self):
        with self.assertRaises(SourceSyntaxError):
            extract_style_source(".a { *zoom: 1; }\n.b { color: red; }")


if __name__ == "__main__":
    unittest.main()
