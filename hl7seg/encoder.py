"""Segment and message encoding.

Encoding is a pure function of (spec, values, delimiters): each declared
field is resolved (value -> default -> ""), escaped, and placed in its
position slot; undeclared positions stay empty. Header segments (MSH) carry
their field separator right after the type code and the encoding
characters as the first field.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple, Union

from .delimiters import DEFAULT_DELIMITERS, SEGMENT_TERMINATOR, Delimiters
from .escaping import escape
from .exceptions import InvalidDelimiterConfiguration, MissingRequiredField
from .models import (
    HEADER_ENCODING_POSITION,
    HEADER_SEGMENT_TYPES,
    FieldDef,
    FieldValue,
    FieldValues,
    Repetitions,
    Segment,
    SegmentSpec,
)
from .registry import SegmentRegistry, default_registry

logger = logging.getLogger(__name__)

FIELD_SEPARATOR_KEY = "field_separator"

SegmentLike = Union[str, Segment, Tuple[Union[SegmentSpec, str], Optional[FieldValues]]]

def _resolve_spec(spec: SegmentSpec | str, registry: SegmentRegistry | None) -> SegmentSpec:
    if isinstance(spec, SegmentSpec):
        return spec
    return (registry or default_registry).lookup(spec)

def _resolve_value(f: FieldDef, values: FieldValues) -> FieldValue:
    value = values.get(f.name)
    if value is None:
        value = f.default
    return "" if value is None else value

def _is_blank(value: FieldValue) -> bool:
    if isinstance(value, (list, tuple)):
        return all(_is_blank(v) for v in value)
    return value is None or str(value) == ""

def _component(value: FieldValue, d: Delimiters) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return d.subcomponent.join("" if s is None else escape(str(s), d) for s in value)
    return escape(str(value), d)

def _render_one(value: FieldValue, f: FieldDef, d: Delimiters) -> str:
    if isinstance(value, (list, tuple)):
        return d.component.join(_component(c, d) for c in value)
    return escape(str(value), d, structured=not f.text)

def render_field(value: FieldValue, f: FieldDef, delimiters: Delimiters = DEFAULT_DELIMITERS) -> str:
    """Render one resolved field value as field text."""
    if isinstance(value, Repetitions):
        return delimiters.repetition.join(
            _render_one("" if item is None else item, f, delimiters) for item in value
        )
    return _render_one(value, f, delimiters)

def _header_delimiters(spec: SegmentSpec, values: FieldValues, delimiters: Delimiters | None) -> Delimiters:
    enc_field = spec.encoding_field
    given_enc = values.get(enc_field.name) if enc_field else None
    given_fs = values.get(FIELD_SEPARATOR_KEY)

    if delimiters is None:
        encoding = given_enc or (enc_field.default if enc_field else None)
        if encoding is None and given_fs is None:
            return DEFAULT_DELIMITERS
        return Delimiters.from_encoding_characters(
            encoding or DEFAULT_DELIMITERS.encoding_characters,
            given_fs or DEFAULT_DELIMITERS.field,
        )

    delimiters.validate()
    if given_enc and given_enc != delimiters.encoding_characters:
        raise InvalidDelimiterConfiguration(
            f"header declares {given_enc!r} but encoding uses {delimiters.encoding_characters!r}",
            segment=spec.type_code,
        )
    if given_fs and given_fs != delimiters.field:
        raise InvalidDelimiterConfiguration(
            f"header declares field separator {given_fs!r} but encoding uses {delimiters.field!r}",
            segment=spec.type_code,
        )
    return delimiters

def _encode(
    spec: SegmentSpec,
    values: FieldValues | None,
    delimiters: Delimiters | None,
    strict: bool,
) -> Tuple[str, Delimiters]:
    values = values or {}
    if spec.header:
        d = _header_delimiters(spec, values, delimiters)
    else:
        d = (delimiters or DEFAULT_DELIMITERS).validate()

    resolved = [(f, _resolve_value(f, values)) for f in spec.fields]
    if strict:
        missing = [f.name for f, v in resolved if f.required and _is_blank(v)]
        if missing:
            raise MissingRequiredField(spec.type_code, missing)

    slots: List[str] = [""] * spec.width
    for f, value in resolved:
        slots[f.position - 1] = render_field(value, f, d)

    if spec.header:
        slots[HEADER_ENCODING_POSITION - 1] = d.encoding_characters
        # MSH-1 is the separator itself, so it is not joined as a slot.
        return spec.type_code + d.field + d.field.join(slots[1:]), d
    return d.field.join([spec.type_code, *slots]), d

def encode_segment(
    spec: SegmentSpec | str,
    values: FieldValues | None = None,
    delimiters: Delimiters | None = None,
    *,
    registry: SegmentRegistry | None = None,
    strict: bool = False,
) -> str:
    """Encode one segment instance into a delimited line.

    Args:
        spec: SegmentSpec, or a type code resolved through ``registry``
            (the default registry when omitted).
        values: field name -> value. Unknown names are ignored; missing
            names fall back to the field default, then to "".
        delimiters: active delimiters. For header segments they may be
            omitted and taken from the ``encoding_characters`` /
            ``field_separator`` values instead.
        strict: raise MissingRequiredField when a required field is blank.

    Raises:
        UnknownSegmentType, InvalidDelimiterConfiguration, MissingRequiredField
    """
    line, _ = _encode(_resolve_spec(spec, registry), values, delimiters, strict)
    return line

def _delimiters_from_line(line: str) -> Delimiters | None:
    """Delimiters declared by a pre-encoded header line, if it is one."""
    if len(line) >= 8 and line[:3] in HEADER_SEGMENT_TYPES:
        fs = line[3]
        return Delimiters.from_encoding_characters(line[4:8], fs)
    return None

def encode_message(
    segments: Iterable[SegmentLike],
    delimiters: Delimiters | None = None,
    *,
    terminator: str = SEGMENT_TERMINATOR,
    registry: SegmentRegistry | None = None,
    strict: bool = False,
) -> str:
    """Join segments into one message, in the order given.

    Items are pre-encoded lines, Segment instances, or ``(spec, values)``
    pairs. Without explicit delimiters the first header segment decides
    them for everything after it. No trailing terminator is added.
    """
    active = delimiters
    lines: List[str] = []
    for item in segments:
        if isinstance(item, str):
            line = item
            if active is None:
                active = _delimiters_from_line(line)
        else:
            if isinstance(item, Segment):
                spec, values = item.spec, item.values
            else:
                spec, values = item
            resolved = _resolve_spec(spec, registry)
            line, used = _encode(resolved, values, active, strict)
            if active is None and resolved.header:
                active = used
        lines.append(line)
    logger.debug("Encoded message with %d segment(s)", len(lines))
    return terminator.join(lines)

class SegmentEncoder:
    """Encoder bound to a registry, delimiters and segment terminator."""

    def __init__(
        self,
        registry: SegmentRegistry | None = None,
        delimiters: Delimiters | None = None,
        terminator: str = SEGMENT_TERMINATOR,
        strict: bool = False,
    ):
        if delimiters is not None:
            delimiters.validate()
        self.registry = registry or default_registry
        self.delimiters = delimiters
        self.terminator = terminator
        self.strict = strict

    def encode_segment(self, spec: SegmentSpec | str, values: FieldValues | None = None) -> str:
        return encode_segment(spec, values, self.delimiters, registry=self.registry, strict=self.strict)

    def encode_message(self, segments: Iterable[SegmentLike]) -> str:
        return encode_message(
            segments,
            self.delimiters,
            terminator=self.terminator,
            registry=self.registry,
            strict=self.strict,
        )
