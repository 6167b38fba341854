"""
Unit tests for style_extraction/traversal.py

Tests class token and ``@import`` target collection.
"""

import unittest

from core.source_location import LineIndex, Span
from style_extraction.parser import parse_bytes
from style_extraction.traversal import extract_class_names, extract_import_paths


def _parse(source: str):
    source_bytes = source.encode("utf-8")
    return parse_bytes(source_bytes).root_node, LineIndex(source_bytes)


class TestExtractClassNames(unittest.TestCase):
    """Test class token collection."""

    def test_compound_selector_yields_each_token(self):
        root, line_index = _parse(".a.b { color: red; }")
        classes = extract_class_names(root, line_index)
        self.assertEqual([c.name for c in classes], ["a", "b"])
        self.assertEqual(classes[0].span, Span.from_points((1, 1), (1, 2)))
        self.assertEqual(classes[1].span, Span.from_points((1, 3), (1, 4)))

    def test_duplicates_are_kept(self):
        root, line_index = _parse(".x {}\n.x, .y {}\n")
        self.assertEqual([c.name for c in extract_class_names(root, line_index)], ["x", "x", "y"])

    def test_pseudo_classes_are_not_classes(self):
        root, line_index = _parse(".btn:hover, a:not(.off) {}")
        self.assertEqual([c.name for c in extract_class_names(root, line_index)], ["btn", "off"])

    def test_nested_at_rules(self):
        root, line_index = _parse(
            "@media (max-width: 100px) {\n"
            "    .inner { display: none; }\n"
            "}\n"
            "@supports (display: grid) {\n"
            "    .grid { display: grid; }\n"
            "}\n"
        )
        classes = extract_class_names(root, line_index)
        self.assertEqual([c.name for c in classes], ["inner", "grid"])
        self.assertEqual(classes[0].span, Span.from_points((2, 5), (2, 10)))

    def test_comments_and_values_are_ignored(self):
        root, line_index = _parse("/* .ghost {} */\n.real { width: 1.5em; }\n")
        self.assertEqual([c.name for c in extract_class_names(root, line_index)], ["real"])


class TestExtractImportPaths(unittest.TestCase):
    """Test ``@import`` target collection."""

    def test_import_forms(self):
        root, line_index = _parse(
            "@import \"double.css\";\n"
            "@import 'single.css';\n"
            "@import url(\"url-double.css\");\n"
            "@import url('../up/url-single.css') screen;\n"
        )
        self.assertEqual(
            extract_import_paths(root, line_index),
            ("double.css", "single.css", "url-double.css", "../up/url-single.css"),
        )

    def test_targets_are_verbatim(self):
        root, line_index = _parse("@import \"./theme\";\n@import \"https://cdn.example.com/a.css\";\n")
        self.assertEqual(
            extract_import_paths(root, line_index),
            ("./theme", "https://cdn.example.com/a.css"),
        )

    def test_no_imports(self):
        root, line_index = _parse(".a {}")
        self.assertEqual(extract_import_paths(root, line_index), ())


if __name__ == "__main__":
    unittest.main()
