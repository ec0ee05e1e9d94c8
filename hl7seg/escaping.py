"""HL7 escape sequences for field text.

    \\F\\  field separator        \\S\\  component separator
    \\T\\  subcomponent separator \\R\\  repetition separator
    \\E\\  escape character       \\Xhh..\\  hex-encoded characters (CR/LF)

`escape` is what the encoder applies; `unescape` is its inverse and only
exists so the transform can be checked for invertibility.
"""

from __future__ import annotations

import re
from typing import Dict

from .delimiters import DEFAULT_DELIMITERS, Delimiters

_LINE_BREAKS = (("\r", "X0D"), ("\n", "X0A"))

def _seq(d: Delimiters, code: str) -> str:
    return f"{d.escape}{code}{d.escape}"

def escape(value: str | None, delimiters: Delimiters = DEFAULT_DELIMITERS, structured: bool = False) -> str:
    """Escape HL7 delimiters in a value.

    With ``structured=True`` the value is field text whose component,
    repetition and subcomponent markers are structure: only the escape
    character, the field separator and line breaks are escaped.
    """
    if value is None:
        return ""
    s = str(value)
    d = delimiters
    # escape character must be replaced first
    s = s.replace(d.escape, _seq(d, "E"))
    s = s.replace(d.field, _seq(d, "F"))
    if not structured:
        s = (
            s.replace(d.component, _seq(d, "S"))
            .replace(d.subcomponent, _seq(d, "T"))
            .replace(d.repetition, _seq(d, "R"))
        )
    for ch, code in _LINE_BREAKS:
        s = s.replace(ch, _seq(d, code))
    return s

def needs_escape(value: str, delimiters: Delimiters = DEFAULT_DELIMITERS) -> bool:
    active = {delimiters.field, *delimiters.encoding_characters, "\r", "\n"}
    return any(ch in active for ch in value)

def unescape(value: str | None, delimiters: Delimiters = DEFAULT_DELIMITERS) -> str:
    if not value:
        return ""
    d = delimiters
    table: Dict[str, str] = {
        "F": d.field,
        "S": d.component,
        "T": d.subcomponent,
        "R": d.repetition,
        "E": d.escape,
    }
    esc = re.escape(d.escape)
    pattern = re.compile(f"{esc}([^{esc}]*){esc}")

    def _replace(m: re.Match) -> str:
        code = m.group(1)
        if code in table:
            return table[code]
        if code[:1] == "X" and len(code) > 1 and len(code) % 2 == 1:
            try:
                return bytes.fromhex(code[1:]).decode("latin-1")
            except ValueError:
                return m.group(0)
        # \H\, \N\, \.br\ and site-defined sequences are left alone
        return m.group(0)

    return pattern.sub(_replace, value)
