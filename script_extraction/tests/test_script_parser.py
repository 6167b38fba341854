"""
Unit tests for script_extraction/parser.py

Tests parser initialization, byte parsing and file-level error mapping.
"""

import unittest
from pathlib import Path

from tree_sitter import Parser

from core.errors import SourceNotFoundError, SourceSyntaxError
from script_extraction.parser import (
    count_error_nodes,
    create_parser,
    parse_bytes,
    parse_file,
)


class TestParserCreation(unittest.TestCase):
    """Test parser initialization."""

    def test_create_parser(self):
        """Test that parser can be created."""
        parser = create_parser()
        self.assertIsInstance(parser, Parser)

    def test_parsers_are_independent(self):
        """Each call hands out a fresh parser."""
        self.assertIsNot(create_parser(), create_parser())


class TestParseBytes(unittest.TestCase):
    """Test parsing raw bytes."""

    def test_parse_registration(self):
        tree = parse_bytes(b"Component({data: {}});")
        self.assertEqual(tree.root_node.type, "program")
        self.assertFalse(tree.root_node.has_error)

    def test_parse_es_module_syntax(self):
        source = b"import {a} from './a';\nexport default Page({});\n"
        tree = parse_bytes(source)
        self.assertFalse(tree.root_node.has_error)

    def test_parse_invalid_type(self):
        """Test that non-bytes input raises TypeError."""
        with self.assertRaises(TypeError):
            parse_bytes("Component({})")

    def test_count_error_nodes(self):
        self.assertEqual(count_error_nodes(parse_bytes(b"Page({});")), 0)
        self.assertGreater(count_error_nodes(parse_bytes(b"Page({data: {a: 1,")), 0)


class TestParseFile(unittest.TestCase):
    """Test file-level parsing."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_parse_fixture(self):
        tree, source_bytes = parse_file(str(self.fixtures_dir / "component.js"))
        self.assertFalse(tree.root_node.has_error)
        self.assertTrue(source_bytes.startswith(b"/**"))

    def test_missing_file(self):
        with self.assertRaises(SourceNotFoundError) as ctx:
            parse_file(str(self.fixtures_dir / "does-not-exist.js"))
        self.assertIsInstance(ctx.exception, FileNotFoundError)

    def test_directory_is_not_readable_source(self):
        with self.assertRaises(SourceNotFoundError):
            parse_file(str(self.fixtures_dir))

    def test_broken_file(self):
        with self.assertRaises(SourceSyntaxError) as ctx:
            parse_file(str(self.fixtures_dir / "broken.js"))
        self.assertGreater(ctx.exception.error_count, 0)
        self.assertTrue(ctx.exception.path.endswith("broken.js"))


if __name__ == "__main__":
    unittest.main()
