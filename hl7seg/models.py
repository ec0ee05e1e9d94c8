"""Segment layout and segment instance models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple, Union

HEADER_SEGMENT_TYPES = frozenset({"MSH", "BHS", "FHS"})

# Header segments: position 1 is the field separator, position 2 the encoding characters.
HEADER_SEPARATOR_POSITION = 1
HEADER_ENCODING_POSITION = 2

@dataclass(frozen=True)
class FieldDef:
    name: str
    position: int  # 1-based, gaps allowed
    default: str | None = None
    required: bool = False
    text: bool = False  # free text: every delimiter gets escaped

@dataclass(frozen=True)
class SegmentSpec:
    type_code: str
    fields: Tuple[FieldDef, ...]
    header: bool = False

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def width(self) -> int:
        """Highest declared position (number of field slots rendered)."""
        if not self.fields:
            return HEADER_ENCODING_POSITION if self.header else 0
        return max(self.fields[-1].position, HEADER_ENCODING_POSITION if self.header else 0)

    @property
    def encoding_field(self) -> FieldDef | None:
        """The header's encoding-characters FieldDef, if declared."""
        if not self.header:
            return None
        for f in self.fields:
            if f.position == HEADER_ENCODING_POSITION:
                return f
        return None

    def field_named(self, name: str) -> FieldDef | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

class Repetitions(tuple):
    """Repeated field value: items are joined with the repetition separator."""

    def __new__(cls, *items: Any):
        return super().__new__(cls, items)

FieldValue = Union[None, str, int, float, list, tuple, Repetitions]
FieldValues = Mapping[str, FieldValue]

@dataclass(frozen=True)
class Segment:
    """One segment instance: a layout (or its type code) plus field values."""

    spec: SegmentSpec | str
    values: Dict[str, FieldValue] = field(default_factory=dict)

    @property
    def type_code(self) -> str:
        return self.spec.type_code if isinstance(self.spec, SegmentSpec) else self.spec
