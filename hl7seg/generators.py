"""Synthetic field values for MSH / EVN / PID / PV1 built with Faker.

Each generator returns a plain dict keyed by the built-in layout field
names, ready to hand to the encoder.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Dict

from faker import Faker

from .models import FieldValue
from .utils import hl7_name_from_full, one_line, trigger_event, ts_hl7

fake = Faker()

ZIP_POOL = [
    ("35209", "Birmingham", "AL"),
    ("02139", "Cambridge", "MA"),
    ("10001", "New York", "NY"),
    ("19104", "Philadelphia", "PA"),
    ("60611", "Chicago", "IL"),
    ("94103", "San Francisco", "CA"),
]

# HL7 table 0005 (race)
RACE_POOL = [
    ("2106-3", "White"),
    ("2054-5", "Black or African American"),
    ("2028-9", "Asian"),
    ("2131-1", "Other Race"),
]

FieldMap = Dict[str, FieldValue]

def gen_header_values(
    message_type: str = "ADT^A01^ADT_A01",
    *,
    sending_application: str = "MEGA_REG",
    sending_facility: str = "XYZHOSP",
    receiving_application: str = "SUPER_OE",
    receiving_facility: str = "XYZIMGCTR",
    when: datetime | None = None,
) -> FieldMap:
    return {
        "sending_application": sending_application,
        "sending_facility": sending_facility,
        "receiving_application": receiving_application,
        "receiving_facility": receiving_facility,
        "date_time_of_message": ts_hl7(when or datetime.now()),
        "message_type": message_type,
        "message_control_id": fake.bothify("MSG########"),
        "processing_id": "P",
        "version_id": "2.5",
    }

def gen_event_values(message_type: str = "ADT^A01^ADT_A01", *, when: datetime | None = None) -> FieldMap:
    recorded = when or fake.date_time_between(start_date="-14d", end_date="now")
    return {
        "event_type_code": trigger_event(message_type),
        "recorded_date_time": ts_hl7(recorded),
        "event_occurred": ts_hl7(recorded),
    }

def gen_patient_values(set_id: int = 1) -> FieldMap:
    zip_code, city, state = random.choice(ZIP_POOL)
    sex = random.choice(["M", "F"])
    name = fake.name_female() if sex == "F" else fake.name_male()
    race_code, race_text = random.choice(RACE_POOL)

    return {
        "set_id": str(set_id),
        "patient_identifier_list": [fake.unique.bothify("########"), "", "", "XYZHOSP", "MR"],
        "patient_name": hl7_name_from_full(name),
        "date_time_of_birth": ts_hl7(fake.date_of_birth(minimum_age=18, maximum_age=90), date_only=True),
        "administrative_sex": sex,
        "race": [race_code, race_text, "HL70005"],
        "patient_address": [one_line(fake.street_address()), "", city, state, zip_code, "", "H"],
        "phone_number_home": one_line(fake.phone_number()),
        "patient_account_number": [fake.bothify("##########"), "", "", "XYZHOSP", "AN"],
        "ssn_number": fake.ssn(),
    }

def gen_visit_values(set_id: int = 1) -> FieldMap:
    admit = fake.date_time_between(start_date="-14d", end_date="-1d")
    discharge = admit + timedelta(hours=random.randint(1, 6))
    doctor = fake.name()
    return {
        "set_id": str(set_id),
        "patient_class": random.choice(["I", "O", "E"]),
        "assigned_patient_location": ["DEPT1", fake.bothify("###"), "1"],
        "attending_doctor": f"{fake.bothify('P######')}^{hl7_name_from_full(doctor)}",
        "hospital_service": "MED",
        "visit_number": fake.unique.bothify("VN##########"),
        "admit_date_time": ts_hl7(admit),
        "discharge_date_time": ts_hl7(discharge),
    }
