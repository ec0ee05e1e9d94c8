"""HL7 v2.x segment encoder."""

from .delimiters import DEFAULT_DELIMITERS, Delimiters
from .encoder import SegmentEncoder, encode_message, encode_segment
from .escaping import escape, unescape
from .exceptions import (
    DuplicateFieldName,
    DuplicatePosition,
    DuplicateSegmentType,
    HL7EncodeError,
    InvalidDelimiterConfiguration,
    InvalidFieldPosition,
    InvalidLayoutError,
    InvalidSegmentType,
    MissingRequiredField,
    NonMonotonicPosition,
    RegistryError,
    UnknownSegmentType,
)
from .models import FieldDef, Repetitions, Segment, SegmentSpec
from .registry import SegmentRegistry, build_default_registry, default_registry

__version__ = "0.1.0"
