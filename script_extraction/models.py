"""
Data models for mini-program script metadata.

Every model is a frozen snapshot built once per extraction call. ``to_dict``
produces the plain serialized document: spans are emitted under ``loc`` and
optional fields are omitted when absent.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from core.source_location import Span

PropertyValue = Union[bool, int, float, str]


class ModuleKind(str, Enum):
    """Registration kind of a script module."""

    COMPONENT = "Component"
    PAGE = "Page"

    @classmethod
    def from_hint(cls, hint: Union["ModuleKind", str, None]) -> Optional["ModuleKind"]:
        """Parse a caller hint such as ``"page"`` or ``ModuleKind.PAGE``."""
        if hint is None or isinstance(hint, ModuleKind):
            return hint
        for kind in cls:
            if kind.value.lower() == str(hint).strip().lower():
                return kind
        raise ValueError(f"Unknown module kind: {hint!r}")


class PropertyType(str, Enum):
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    STRING = "String"
    OBJECT = "Object"


def _with_optional(payload: Dict[str, Any], **optional: Any) -> Dict[str, Any]:
    for key, value in optional.items():
        if value is not None:
            payload[key] = value
    return payload


@dataclass(frozen=True)
class DataMeta:
    """One key of the ``data`` literal.

    Attributes:
        name: Key text, normalized to a string.
        span: Span of the key token.
        comment: Raw leading comment text, delimiters included.
        children: Entries of a nested object literal. ``None`` when the value
            is not an object literal, an empty tuple for ``{}``.
    """

    name: str
    span: Span
    comment: Optional[str] = None
    children: Optional[Tuple["DataMeta", ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        children = None
        if self.children is not None:
            children = [child.to_dict() for child in self.children]
        return _with_optional(
            {"name": self.name, "loc": self.span.to_dict()},
            comment=self.comment,
            children=children,
        )


@dataclass(frozen=True)
class PropertyMeta:
    """One entry of a component's ``properties`` section."""

    name: str
    span: Span
    type: PropertyType
    value: Optional[PropertyValue] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_optional(
            {"name": self.name, "loc": self.span.to_dict(), "type": self.type.value},
            value=self.value,
            comment=self.comment,
        )


@dataclass(frozen=True)
class MethodMeta:
    name: str
    span: Span
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_optional(
            {"name": self.name, "loc": self.span.to_dict()}, comment=self.comment
        )


@dataclass(frozen=True)
class EventMeta:
    """A distinct event name passed to ``this.triggerEvent``."""

    name: str
    span: Span
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_optional(
            {"name": self.name, "loc": self.span.to_dict()}, comment=self.comment
        )


@dataclass(frozen=True)
class PageMeta:
    """Metadata of a ``Page({...})`` module.

    Pages have no external property contract and no event pass; they
    serialize with an empty ``properties`` list.
    """

    data: Tuple[DataMeta, ...] = ()
    methods: Tuple[MethodMeta, ...] = ()

    kind: ClassVar[ModuleKind] = ModuleKind.PAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "data": [item.to_dict() for item in self.data],
            "methods": [item.to_dict() for item in self.methods],
            "properties": [],
        }


@dataclass(frozen=True)
class ComponentMeta:
    """Metadata of a ``Component({...})`` module.

    ``events`` is ``None`` when the advisory event pass was disabled or
    could not complete.
    """

    data: Tuple[DataMeta, ...] = ()
    methods: Tuple[MethodMeta, ...] = ()
    properties: Tuple[PropertyMeta, ...] = ()
    events: Optional[Tuple[EventMeta, ...]] = None

    kind: ClassVar[ModuleKind] = ModuleKind.COMPONENT

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.kind.value,
            "data": [item.to_dict() for item in self.data],
            "methods": [item.to_dict() for item in self.methods],
            "properties": [item.to_dict() for item in self.properties],
        }
        if self.events is not None:
            payload["events"] = [item.to_dict() for item in self.events]
        return payload


ScriptMeta = Union[ComponentMeta, PageMeta]
