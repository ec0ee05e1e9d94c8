"""Built-in segment layouts (MSH/EVN/PID/PV1).

Only the segments an ADT^A01 needs are declared here; other segment types
are registered by callers or loaded from a YAML layout file.

Entries are ``(name, position)`` or ``(name, position, default)``; positions
follow the HL7 v2.5 field numbering.
"""

from __future__ import annotations

from typing import Dict, Tuple

MSH = (
    ("encoding_characters", 2, "^~\\&"),
    ("sending_application", 3),
    ("sending_facility", 4),
    ("receiving_application", 5),
    ("receiving_facility", 6),
    ("date_time_of_message", 7),
    ("security", 8),
    ("message_type", 9),
    ("message_control_id", 10),
    ("processing_id", 11, "P"),
    ("version_id", 12, "2.5"),
)

EVN = (
    ("event_type_code", 1),
    ("recorded_date_time", 2),
    ("date_time_planned_event", 3),
    ("event_reason_code", 4),
    ("operator_id", 5),
    ("event_occurred", 6),
)

PID = (
    ("set_id", 1),
    ("patient_id", 2),
    ("patient_identifier_list", 3),
    ("alternate_patient_id", 4),
    ("patient_name", 5),
    ("mothers_maiden_name", 6),
    ("date_time_of_birth", 7),
    ("administrative_sex", 8),
    ("patient_alias", 9),
    ("race", 10),
    ("patient_address", 11),
    ("county_code", 12),
    ("phone_number_home", 13),
    ("phone_number_business", 14),
    ("primary_language", 15),
    ("marital_status", 16),
    ("religion", 17),
    ("patient_account_number", 18),
    ("ssn_number", 19),
)

PV1 = (
    ("set_id", 1),
    ("patient_class", 2),
    ("assigned_patient_location", 3),
    ("attending_doctor", 7),
    ("hospital_service", 10),
    ("visit_number", 19),
    ("admit_date_time", 44),
    ("discharge_date_time", 45),
)

BUILTIN_LAYOUTS: Dict[str, Tuple[tuple, ...]] = {
    "MSH": MSH,
    "EVN": EVN,
    "PID": PID,
    "PV1": PV1,
}

# Fields a strict encode refuses to leave blank.
REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "MSH": ("sending_application", "message_type", "message_control_id"),
    "EVN": ("recorded_date_time",),
    "PID": ("patient_identifier_list", "patient_name"),
    "PV1": ("patient_class",),
}
