"""
Unit tests for script_extraction/events.py

Tests collection of ``this.triggerEvent(...)`` names from component methods.
"""

import unittest

from core.source_location import LineIndex, Span
from script_extraction.parser import parse_bytes
from script_extraction.traversal import find_object_property, find_registration_call
from script_extraction.events import scan_trigger_events


def _methods(source: str):
    source_bytes = source.encode("utf-8")
    tree = parse_bytes(source_bytes)
    line_index = LineIndex(source_bytes)
    call = find_registration_call(tree.root_node, line_index)
    return find_object_property(call.options, "methods", line_index), line_index


class TestScanTriggerEvents(unittest.TestCase):
    """Test event name discovery."""

    def test_distinct_names_in_first_occurrence_order(self):
        methods, line_index = _methods(
            "Component({methods: {\n"
            "    a() { this.triggerEvent('open'); this.triggerEvent('close'); },\n"
            "    b() { this.triggerEvent('open', {}); }\n"
            "}});\n"
        )
        events = scan_trigger_events(methods, line_index)
        self.assertEqual([e.name for e in events], ["open", "close"])
        self.assertEqual(events[0].span, Span.from_points((2, 10), (2, 27)))

    def test_nested_callbacks_are_scanned(self):
        methods, line_index = _methods(
            "Component({methods: {\n"
            "    a() {\n"
            "        setTimeout(() => {\n"
            "            this.triggerEvent(`later`);\n"
            "        }, 10);\n"
            "    }\n"
            "}});\n"
        )
        self.assertEqual([e.name for e in scan_trigger_events(methods, line_index)], ["later"])

    def test_non_literal_names_are_skipped(self):
        methods, line_index = _methods(
            "Component({methods: {\n"
            "    a(name) {\n"
            "        this.triggerEvent(name);\n"
            "        this.triggerEvent(`tap-${name}`);\n"
            "        this.triggerEvent('');\n"
            "        this.triggerEvent();\n"
            "        this.triggerEvent('ok');\n"
            "    }\n"
            "}});\n"
        )
        self.assertEqual([e.name for e in scan_trigger_events(methods, line_index)], ["ok"])

    def test_other_receivers_are_ignored(self):
        methods, line_index = _methods(
            "Component({methods: {\n"
            "    a() {\n"
            "        that.triggerEvent('x');\n"
            "        this.emit('y');\n"
            "        triggerEvent('z');\n"
            "    }\n"
            "}});\n"
        )
        self.assertEqual(scan_trigger_events(methods, line_index), [])

    def test_custom_trigger_method(self):
        methods, line_index = _methods("Component({methods: {a() { this.emit('y'); }}});")
        events = scan_trigger_events(methods, line_index, trigger_method="emit")
        self.assertEqual([e.name for e in events], ["y"])

    def test_leading_comment_of_statement(self):
        methods, line_index = _methods(
            "Component({methods: {\n"
            "    a() {\n"
            "        // notify parent\n"
            "        this.triggerEvent('change');\n"
            "    }\n"
            "}});\n"
        )
        events = scan_trigger_events(methods, line_index)
        self.assertEqual(events[0].comment, "// notify parent")

    def test_non_function_entries_are_not_scanned(self):
        methods, line_index = _methods(
            "Component({methods: {handlers: {a() { this.triggerEvent('x'); }}}});"
        )
        self.assertEqual(scan_trigger_events(methods, line_index), [])


if __name__ == "__main__":
    unittest.main()
