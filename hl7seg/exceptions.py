"""Errors raised while declaring segment layouts or encoding segments."""

from __future__ import annotations

class HL7EncodeError(Exception):
    """Base class for every error raised by hl7seg."""

    def __init__(
        self,
        message: str,
        segment: str | None = None,
        field: str | None = None,
        position: int | None = None,
    ):
        self.segment = segment
        self.field = field
        self.position = position

        details = []
        if segment:
            details.append(f"segment={segment}")
        if field:
            details.append(f"field={field}")
        if position is not None:
            details.append(f"position={position}")

        full_message = message
        if details:
            full_message = f"{message} [{', '.join(details)}]"
        super().__init__(full_message)

# Registry (construction-time) errors
class RegistryError(HL7EncodeError):
    """A segment layout violates the registry contract."""

class DuplicateSegmentType(RegistryError):
    def __init__(self, type_code: str):
        super().__init__(f"Segment type '{type_code}' is already registered", segment=type_code)

class DuplicatePosition(RegistryError):
    def __init__(self, type_code: str, name: str, position: int, other: str):
        self.other = other
        super().__init__(
            f"Field '{name}' reuses position {position} already held by '{other}'",
            segment=type_code,
            field=name,
            position=position,
        )

class NonMonotonicPosition(RegistryError):
    def __init__(self, type_code: str, name: str, position: int, previous: int):
        self.previous = previous
        super().__init__(
            f"Field '{name}' at position {position} is declared after position {previous}",
            segment=type_code,
            field=name,
            position=position,
        )

class DuplicateFieldName(RegistryError):
    def __init__(self, type_code: str, name: str):
        super().__init__(f"Field name '{name}' is declared twice", segment=type_code, field=name)

class InvalidFieldPosition(RegistryError):
    def __init__(self, type_code: str, name: str, position: object, reason: str):
        self.reason = reason
        super().__init__(
            f"Invalid position {position!r}: {reason}",
            segment=type_code,
            field=name,
        )

class InvalidSegmentType(RegistryError):
    def __init__(self, type_code: object):
        super().__init__(
            f"Invalid segment type code {type_code!r}: expected three upper-case letters or digits"
        )

class InvalidLayoutError(RegistryError):
    """A YAML layout file cannot be turned into segment specs."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid layout file '{path}': {reason}")

# Per-encode errors
class UnknownSegmentType(HL7EncodeError):
    def __init__(self, type_code: str):
        self.type_code = type_code
        super().__init__(f"Segment type '{type_code}' is not registered", segment=type_code)

class InvalidDelimiterConfiguration(HL7EncodeError):
    def __init__(self, reason: str, segment: str | None = None):
        self.reason = reason
        super().__init__(f"Invalid delimiter configuration: {reason}", segment=segment)

class MissingRequiredField(HL7EncodeError):
    """Raised only by strict encodes when required fields resolve blank."""

    def __init__(self, type_code: str, names):
        self.names = list(names)
        super().__init__(
            f"Required field(s) blank: {', '.join(self.names)}",
            segment=type_code,
        )
