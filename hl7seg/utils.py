"""Helpers for turning caller data into HL7 field values."""

from __future__ import annotations

import re
from datetime import datetime

def ts_hl7(dt: datetime | str | None, *, date_only: bool = False) -> str:
    """HL7 TS: YYYYMMDDHHMMSS (or YYYYMMDD); None -> '' ; str -> digits-only."""
    if dt is None:
        return ""
    if isinstance(dt, str):
        digits = re.sub(r"\D", "", dt)
        return digits[:8] if date_only else digits
    return dt.strftime("%Y%m%d" if date_only else "%Y%m%d%H%M%S")

def one_line(s: str | None) -> str:
    if not s:
        return ""
    return re.sub(r"\s+", " ", s.replace("\r", " ").replace("\n", " ")).strip()

def hl7_name_from_display(patient_name: str) -> str:
    """Convert 'LAST, FIRST' into HL7 XPN family^given."""
    if not patient_name:
        return ""
    parts = [p.strip() for p in str(patient_name).split(",", 1)]
    family = parts[0] if parts else ""
    given = parts[1] if len(parts) > 1 else ""
    return f"{family}^{given}" if given else family

def hl7_name_from_full(display_name: str) -> str:
    """Convert 'First Last' or 'LAST, FIRST' into HL7 XPN family^given."""
    if not display_name:
        return ""
    s = str(display_name).strip()
    if "," in s:
        return hl7_name_from_display(s)
    parts = s.split()
    if len(parts) == 1:
        return parts[0].upper()
    given, family = parts[0], parts[-1]
    return f"{family.upper()}^{given.upper()}"

def trigger_event(message_type: str, component: str = "^") -> str:
    """'ADT^A01^ADT_A01' -> 'A01'."""
    parts = (message_type or "").split(component)
    return parts[1] if len(parts) > 1 else ""

def safe_for_filename(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9_\-]", "_", value or "")
