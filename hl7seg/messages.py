"""High-level HL7 message builders.

Keeps only what an admission needs:
- ADT^A01: MSH, EVN, PID, optional PV1
"""

from __future__ import annotations

from typing import Dict, List

from .delimiters import SEGMENT_TERMINATOR
from .encoder import SegmentLike, encode_message
from .models import FieldValues
from .registry import SegmentRegistry
from .utils import trigger_event

ADT_A01 = "ADT^A01^ADT_A01"

def build_adt_a01(
    header: FieldValues,
    event: FieldValues,
    patient: FieldValues,
    visit: FieldValues | None = None,
    *,
    registry: SegmentRegistry | None = None,
    terminator: str = SEGMENT_TERMINATOR,
    strict: bool = False,
) -> str:
    """Admit/visit notification: MSH + EVN + PID (+ PV1).

    The header gets ``message_type`` ADT^A01^ADT_A01 unless the caller set
    one, and the event type code defaults to the message trigger (A01).
    """
    msh: Dict = dict(header)
    if not msh.get("message_type"):
        msh["message_type"] = ADT_A01
    evn: Dict = dict(event)
    if not evn.get("event_type_code"):
        evn["event_type_code"] = trigger_event(msh["message_type"])

    parts: List[SegmentLike] = [("MSH", msh), ("EVN", evn), ("PID", patient)]
    if visit is not None:
        parts.append(("PV1", visit))
    return encode_message(parts, terminator=terminator, registry=registry, strict=strict)
