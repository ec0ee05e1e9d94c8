"""HL7 delimiter set.

The field separator is written right after the header segment type code
(MSH-1) and the four encoding characters follow as MSH-2, in the order
component, repetition, escape, subcomponent.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidDelimiterConfiguration

DEFAULT_FIELD_SEPARATOR = "|"
DEFAULT_COMPONENT_SEPARATOR = "^"
DEFAULT_REPETITION_SEPARATOR = "~"
DEFAULT_ESCAPE_CHARACTER = "\\"
DEFAULT_SUBCOMPONENT_SEPARATOR = "&"
DEFAULT_ENCODING_CHARACTERS = "^~\\&"

SEGMENT_TERMINATOR = "\r"

_FORBIDDEN = {"\r", "\n"}

@dataclass(frozen=True)
class Delimiters:
    field: str = DEFAULT_FIELD_SEPARATOR
    component: str = DEFAULT_COMPONENT_SEPARATOR
    repetition: str = DEFAULT_REPETITION_SEPARATOR
    escape: str = DEFAULT_ESCAPE_CHARACTER
    subcomponent: str = DEFAULT_SUBCOMPONENT_SEPARATOR

    @property
    def encoding_characters(self) -> str:
        """MSH-2 value: component, repetition, escape, subcomponent."""
        return f"{self.component}{self.repetition}{self.escape}{self.subcomponent}"

    @classmethod
    def from_encoding_characters(
        cls,
        encoding_characters: str = DEFAULT_ENCODING_CHARACTERS,
        field_separator: str = DEFAULT_FIELD_SEPARATOR,
    ) -> "Delimiters":
        if not isinstance(encoding_characters, str) or len(encoding_characters) != 4:
            raise InvalidDelimiterConfiguration(
                f"encoding characters must be exactly four characters, got {encoding_characters!r}"
            )
        component, repetition, escape, subcomponent = encoding_characters
        return cls(
            field=field_separator,
            component=component,
            repetition=repetition,
            escape=escape,
            subcomponent=subcomponent,
        ).validate()

    def validate(self) -> "Delimiters":
        """Return self, or raise InvalidDelimiterConfiguration."""
        chars = [self.field, self.component, self.repetition, self.escape, self.subcomponent]
        for ch in chars:
            if not isinstance(ch, str) or len(ch) != 1:
                raise InvalidDelimiterConfiguration(f"delimiter {ch!r} is not a single character")
            if ch in _FORBIDDEN or ch.isalnum() or ch.isspace():
                raise InvalidDelimiterConfiguration(f"delimiter {ch!r} cannot be used")
        encoding = self.encoding_characters
        if len(set(encoding)) != 4:
            raise InvalidDelimiterConfiguration(
                f"encoding characters must be distinct, got {encoding!r}"
            )
        if self.field in encoding:
            raise InvalidDelimiterConfiguration(
                f"field separator {self.field!r} collides with encoding characters {encoding!r}"
            )
        return self

DEFAULT_DELIMITERS = Delimiters()
