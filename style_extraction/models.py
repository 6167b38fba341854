"""
Data models for stylesheet metadata.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from core.source_location import Span


@dataclass(frozen=True)
class ClassNameMeta:
    """One class token of a selector, without the leading dot."""

    name: str
    span: Span

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "loc": self.span.to_dict()}


@dataclass(frozen=True)
class CssMeta:
    """Classes and raw ``@import`` targets of one stylesheet.

    Attributes:
        classes: Class tokens in declaration order, duplicates preserved.
        imports: Import targets verbatim, in declaration order.
    """

    classes: Tuple[ClassNameMeta, ...] = ()
    imports: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "classes": [item.to_dict() for item in self.classes],
            "imports": list(self.imports),
        }
