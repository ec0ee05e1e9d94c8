"""Segment layout registry.

Layouts are registered once at startup (built-ins, caller code, or YAML
files) and only looked up afterwards. Registration errors are meant to
abort startup; nothing here catches them.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Union

import yaml

from .exceptions import (
    DuplicateFieldName,
    DuplicatePosition,
    DuplicateSegmentType,
    InvalidFieldPosition,
    InvalidLayoutError,
    InvalidSegmentType,
    NonMonotonicPosition,
    UnknownSegmentType,
)
from .models import (
    HEADER_ENCODING_POSITION,
    HEADER_SEGMENT_TYPES,
    HEADER_SEPARATOR_POSITION,
    FieldDef,
    SegmentSpec,
)
from .segments import BUILTIN_LAYOUTS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

_TYPE_CODE = re.compile(r"^[A-Z][A-Z0-9]{2}$")

FieldLike = Union[FieldDef, tuple, list, Dict[str, Any]]

def _to_field_def(type_code: str, item: FieldLike) -> FieldDef:
    if isinstance(item, FieldDef):
        return item
    if isinstance(item, dict):
        return FieldDef(
            name=item["name"],
            position=item["position"],
            default=None if item.get("default") is None else str(item["default"]),
            required=bool(item.get("required", False)),
            text=bool(item.get("text", False)),
        )
    if isinstance(item, (tuple, list)) and len(item) in (2, 3):
        name, position = item[0], item[1]
        default = item[2] if len(item) == 3 else None
        return FieldDef(name=name, position=position, default=default)
    raise TypeError(f"Cannot build a field definition for {type_code} from {item!r}")

def _check_layout(type_code: str, fields: List[FieldDef], header: bool) -> None:
    seen_names = set()
    by_position: Dict[int, str] = {}
    previous = 0
    for f in fields:
        if not isinstance(f.name, str) or not f.name:
            raise InvalidFieldPosition(type_code, str(f.name), f.position, "field name must be a non-empty string")
        if isinstance(f.position, bool) or not isinstance(f.position, int):
            raise InvalidFieldPosition(type_code, f.name, f.position, "position must be an integer")
        if f.position < 1:
            raise InvalidFieldPosition(type_code, f.name, f.position, "positions are 1-based")
        if header and f.position == HEADER_SEPARATOR_POSITION:
            raise InvalidFieldPosition(
                type_code, f.name, f.position, "position 1 of a header segment is the field separator"
            )
        if f.name in seen_names:
            raise DuplicateFieldName(type_code, f.name)
        if f.position in by_position:
            raise DuplicatePosition(type_code, f.name, f.position, by_position[f.position])
        if f.position < previous:
            raise NonMonotonicPosition(type_code, f.name, f.position, previous)
        seen_names.add(f.name)
        by_position[f.position] = f.name
        previous = f.position

class SegmentRegistry:
    """Type code -> SegmentSpec."""

    def __init__(self):
        self._specs: Dict[str, SegmentSpec] = {}

    def register(
        self,
        type_code: str,
        fields: Iterable[FieldLike],
        header: bool | None = None,
    ) -> SegmentSpec:
        if not isinstance(type_code, str) or not _TYPE_CODE.match(type_code):
            raise InvalidSegmentType(type_code)
        if type_code in self._specs:
            raise DuplicateSegmentType(type_code)
        if header is None:
            header = type_code in HEADER_SEGMENT_TYPES

        defs = [_to_field_def(type_code, item) for item in fields]
        _check_layout(type_code, defs, header)

        spec = SegmentSpec(type_code=type_code, fields=tuple(defs), header=header)
        self._specs[type_code] = spec
        logger.debug("Registered segment %s with %d field(s)", type_code, len(defs))
        return spec

    def lookup(self, type_code: str) -> SegmentSpec:
        try:
            return self._specs[type_code]
        except (KeyError, TypeError):
            raise UnknownSegmentType(type_code) from None

    def type_codes(self) -> List[str]:
        return list(self._specs)

    def __contains__(self, type_code: object) -> bool:
        return type_code in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self) -> Iterator[SegmentSpec]:
        return iter(self._specs.values())

    # ---------- loading ----------

    def load_yaml(self, path: str | Path) -> List[SegmentSpec]:
        """Register every segment declared in a YAML layout file.

        Expected shape::

            segments:
              ZPI:
                fields:
                  - {name: set_id, position: 1}
                  - {name: pet_name, position: 2, default: NONE, text: true}
        """
        p = Path(path)
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise InvalidLayoutError(str(p), str(e)) from e

        segments = data.get("segments") if isinstance(data, dict) else None
        if not isinstance(segments, dict):
            raise InvalidLayoutError(str(p), "top-level 'segments' mapping is missing")

        registered: List[SegmentSpec] = []
        for type_code, body in segments.items():
            if not isinstance(body, dict) or not isinstance(body.get("fields"), list):
                raise InvalidLayoutError(str(p), f"segment {type_code!r} needs a 'fields' list")
            try:
                defs = [_to_field_def(str(type_code), item) for item in body["fields"]]
            except (KeyError, TypeError) as e:
                raise InvalidLayoutError(str(p), f"segment {type_code!r}: bad field entry ({e})") from e
            registered.append(self.register(type_code, defs, header=body.get("header")))
        logger.debug("Loaded %d segment layout(s) from %s", len(registered), p)
        return registered

def build_default_registry() -> SegmentRegistry:
    """Fresh registry holding the built-in MSH/EVN/PID/PV1 layouts."""
    registry = SegmentRegistry()
    for type_code, layout in BUILTIN_LAYOUTS.items():
        required = REQUIRED_FIELDS.get(type_code, ())
        defs = []
        for entry in layout:
            f = _to_field_def(type_code, entry)
            defs.append(FieldDef(f.name, f.position, f.default, required=f.name in required))
        registry.register(type_code, defs)
    return registry

default_registry = build_default_registry()
