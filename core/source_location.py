"""Source location contract shared by all metadata nodes.

Lines are 1-based and columns are 0-based character offsets from the
start of the line. tree-sitter reports byte columns, so every span is
converted through a :class:`LineIndex` built over the source bytes.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Dict, List

from tree_sitter import Node


@dataclass(frozen=True)
class Position:
    """A single point in the source text."""

    line: int
    column: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column}


@dataclass(frozen=True)
class Span:
    """Start/end range of a metadata node in the source text."""

    start: Position
    end: Position

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_points(cls, start: tuple[int, int], end: tuple[int, int]) -> "Span":
        """Build a span from ``(line, column)`` pairs."""
        return cls(Position(*start), Position(*end))


UTF8_BOM = b"\xef\xbb\xbf"


class LineIndex:
    """Map byte offsets of a source buffer to line/character positions.

    A leading UTF-8 byte order mark is not part of line 1; columns on the
    first line count from the character after it.
    """

    def __init__(self, source_bytes: bytes) -> None:
        self._source = source_bytes
        first_line = len(UTF8_BOM) if source_bytes.startswith(UTF8_BOM) else 0
        self._line_starts: List[int] = [first_line]
        offset = source_bytes.find(b"\n")
        while offset != -1:
            self._line_starts.append(offset + 1)
            offset = source_bytes.find(b"\n", offset + 1)

    def position(self, byte_offset: int) -> Position:
        line_idx = max(bisect_right(self._line_starts, byte_offset) - 1, 0)
        byte_offset = max(byte_offset, self._line_starts[line_idx])
        line_start = self._line_starts[line_idx]
        prefix = self._source[line_start:byte_offset]
        column = len(prefix.decode("utf-8", errors="replace"))
        return Position(line=line_idx + 1, column=column)

    def span(self, node: Node) -> Span:
        """Span of a tree-sitter node."""
        return Span(self.position(node.start_byte), self.position(node.end_byte))

    def text(self, node: Node) -> str:
        return self._source[node.start_byte:node.end_byte].decode(
            "utf-8", errors="replace"
        )
