"""Unit tests for segment and message encoding."""

import pytest

from hl7seg.delimiters import DEFAULT_DELIMITERS, Delimiters
from hl7seg.encoder import SegmentEncoder, encode_message, encode_segment
from hl7seg.escaping import unescape
from hl7seg.exceptions import InvalidDelimiterConfiguration, MissingRequiredField, UnknownSegmentType
from hl7seg.models import FieldDef, Repetitions, Segment
from hl7seg.registry import SegmentRegistry, default_registry

HEADER_VALUES = {
    "sending_application": "MEGA_REG",
    "sending_facility": "XYZHOSP",
    "receiving_application": "SUPER_OE",
    "receiving_facility": "XYZIMGCTR",
    "date_time_of_message": "20060529090131-0500",
    "security": "L",
    "message_type": "ADT^A01^ADT_A01",
    "message_control_id": "01052901",
}

PATIENT_VALUES = {
    "patient_identifier_list": "56782445^^^UAReg^PI",
    "patient_name": "KLEINSAMPLE^BARRY^Q^JR",
    "date_of_birth": "19620910",
    "administrative_sex": "M",
}


@pytest.fixture
def pid_registry():
    registry = SegmentRegistry()
    registry.register(
        "PID",
        [
            FieldDef("patient_identifier_list", 3),
            FieldDef("patient_name", 5),
            FieldDef("date_of_birth", 7),
            FieldDef("administrative_sex", 8),
        ],
    )
    return registry


# Tests for plain segments
class TestEncodeSegment:
    """Tests for encode_segment on non-header segments."""

    def test_patient_segment_with_gaps(self, pid_registry):
        """Test undeclared positions render as empty slots."""
        line = encode_segment("PID", PATIENT_VALUES, registry=pid_registry)

        assert line == "PID|||56782445^^^UAReg^PI||KLEINSAMPLE^BARRY^Q^JR||19620910|M"

    def test_accepts_spec_object(self, pid_registry):
        """Test a SegmentSpec can be passed directly."""
        spec = pid_registry.lookup("PID")

        assert encode_segment(spec, PATIENT_VALUES) == encode_segment("PID", PATIENT_VALUES, registry=pid_registry)

    def test_missing_values_use_default_then_empty(self):
        """Test absent and None values fall back to defaults or ''."""
        registry = SegmentRegistry()
        registry.register("ZPI", [("a", 1), ("b", 2, "DEF"), ("c", 3)])

        assert encode_segment("ZPI", {}, registry=registry) == "ZPI||DEF|"
        assert encode_segment("ZPI", {"b": None, "c": "x"}, registry=registry) == "ZPI||DEF|x"
        assert encode_segment("ZPI", {"b": ""}, registry=registry) == "ZPI|||"

    def test_unknown_keys_ignored(self):
        """Test keys outside the layout do not change the output."""
        assert encode_segment("PID", {"bogus": "x|y"}) == encode_segment("PID", {})

    def test_token_count_matches_layout(self):
        """Test contiguous layouts render one token per field plus the type code."""
        for code in ("EVN", "PID"):
            spec = default_registry.lookup(code)
            assert len(encode_segment(spec, {}).split("|")) == len(spec.fields) + 1

        pv1 = default_registry.lookup("PV1")
        assert len(encode_segment(pv1, {}).split("|")) == pv1.width + 1

    def test_event_segment(self):
        """Test the built-in EVN layout."""
        line = encode_segment("EVN", {"event_type_code": "A01", "recorded_date_time": "20060529090000"})

        assert line == "EVN|A01|20060529090000||||"

    def test_field_separator_in_value_is_escaped(self):
        """Test a stray field separator cannot shift later fields."""
        line = encode_segment("PID", {"patient_name": "DOE|JOHN", "administrative_sex": "F"})

        fields = line.split("|")
        assert fields[5] == "DOE\\F\\JOHN"
        assert fields[8] == "F"

    def test_escape_character_in_value_is_escaped(self):
        """Test a literal backslash survives encoding and cannot fake a separator."""
        path = encode_segment("PID", {"patient_name": "C:\\temp|x"}).split("|")[5]
        literal = encode_segment("PID", {"patient_name": "a\\F\\b"}).split("|")[5]
        separated = encode_segment("PID", {"patient_name": "a|b"}).split("|")[5]

        assert path == "C:\\E\\temp\\F\\x"
        assert unescape(path) == "C:\\temp|x"
        assert literal != separated
        assert unescape(literal) == "a\\F\\b"
        assert unescape(separated) == "a|b"

    def test_text_field_escapes_everything(self):
        """Test free-text fields escape component markers too."""
        registry = SegmentRegistry()
        registry.register("NTE", [FieldDef("set_id", 1), FieldDef("comment", 3, text=True)])

        line = encode_segment("NTE", {"set_id": 1, "comment": "Smith & Sons ^ co"}, registry=registry)

        assert line == "NTE|1||Smith \\T\\ Sons \\S\\ co"
        assert unescape(line.split("|")[3]) == "Smith & Sons ^ co"

    def test_component_sequences(self):
        """Test list values become components, nested lists subcomponents."""
        line = encode_segment("PID", {"patient_name": ["O^NEIL", "ANN"], "patient_address": [["1", "Main"], "", "X"]})

        fields = line.split("|")
        assert fields[5] == "O\\S\\NEIL^ANN"
        assert fields[11] == "1&Main^^X"

    def test_repetitions(self):
        """Test repeated values join with the repetition separator."""
        line = encode_segment("PID", {"race": Repetitions(["2028-9", "Asian"], "2106-3^White", None)})

        assert line.split("|")[10] == "2028-9^Asian~2106-3^White~"

    def test_numbers_rendered_as_text(self):
        """Test non-string scalars are rendered with str()."""
        assert encode_segment("PV1", {"set_id": 1}).startswith("PV1|1|")

    def test_custom_delimiters(self):
        """Test a non-standard field separator is used throughout."""
        d = Delimiters.from_encoding_characters("^~\\&", "#")

        line = encode_segment("EVN", {"event_type_code": "A#1"}, d)

        assert line == "EVN#A\\F\\1#####"

    def test_unknown_segment_type(self):
        """Test an unregistered type code fails before producing output."""
        with pytest.raises(UnknownSegmentType):
            encode_segment("ZZZ", {"a": "b"})

    def test_idempotent(self):
        """Test encoding twice gives identical output."""
        values = {"patient_name": ["DOE", "JANE"], "administrative_sex": "F"}

        assert encode_segment("PID", values) == encode_segment("PID", values)


# Tests for header segments
class TestEncodeHeader:
    """Tests for MSH encoding."""

    def test_header_line(self):
        """Test MSH carries its separator and encoding characters as data."""
        line = encode_segment("MSH", HEADER_VALUES)

        assert line == (
            "MSH|^~\\&|MEGA_REG|XYZHOSP|SUPER_OE|XYZIMGCTR|20060529090131-0500|L|"
            "ADT^A01^ADT_A01|01052901|P|2.5"
        )

    def test_header_token_count(self):
        """Test the first field token is the encoding characters verbatim."""
        spec = default_registry.lookup("MSH")
        tokens = encode_segment(spec, {}).split("|")

        assert len(tokens) == len(spec.fields) + 1
        assert tokens[0] == "MSH"
        assert tokens[1] == "^~\\&"

    def test_header_defaults(self):
        """Test processing and version IDs default to P and 2.5."""
        tokens = encode_segment("MSH", {}).split("|")

        assert tokens[10] == "P"
        assert tokens[11] == "2.5"
        assert tokens[2] == ""

    def test_header_values_configure_delimiters(self):
        """Test encoding characters supplied as values are honored."""
        line = encode_segment("MSH", {"encoding_characters": "$~\\&", "field_separator": "#", "sending_application": "A"})

        assert line.startswith("MSH#$~\\&#A#")

    def test_header_conflicting_with_delimiters(self):
        """Test a header value contradicting explicit delimiters fails."""
        with pytest.raises(InvalidDelimiterConfiguration):
            encode_segment("MSH", {"encoding_characters": "$~\\&"}, DEFAULT_DELIMITERS)

    def test_invalid_encoding_characters(self):
        """Test a malformed encoding characters value fails."""
        with pytest.raises(InvalidDelimiterConfiguration):
            encode_segment("MSH", {"encoding_characters": "^~&"})

    def test_strict_rejects_blank_required_fields(self):
        """Test strict mode lists the blank required fields."""
        with pytest.raises(MissingRequiredField) as exc:
            encode_segment("MSH", {"sending_application": "A"}, strict=True)

        assert exc.value.names == ["message_type", "message_control_id"]

    def test_non_strict_renders_blank_required_fields(self):
        """Test required fields are only enforced in strict mode."""
        assert encode_segment("PID", {}).startswith("PID|")
        assert encode_segment("MSH", HEADER_VALUES, strict=True).startswith("MSH|")


# Tests for messages
class TestEncodeMessage:
    """Tests for encode_message and SegmentEncoder."""

    def test_three_segment_message(self):
        """Test header, event and patient join into three CR-separated lines."""
        msg = encode_message(
            [
                ("MSH", HEADER_VALUES),
                ("EVN", {"event_type_code": "A01", "recorded_date_time": "20060529090000"}),
                Segment("PID", {"patient_name": "KLEINSAMPLE^BARRY^Q^JR"}),
            ]
        )

        lines = msg.split("\r")
        assert len(lines) == 3
        assert [line[:3] for line in lines] == ["MSH", "EVN", "PID"]
        assert not msg.endswith("\r")

    def test_order_preserved_and_not_deduplicated(self):
        """Test segments are emitted as given."""
        msg = encode_message(["MSH|^~\\&|A", "NTE|1", "NTE|1", "PID|1"])

        assert msg == "MSH|^~\\&|A\rNTE|1\rNTE|1\rPID|1"

    def test_header_delimiters_apply_to_later_segments(self):
        """Test delimiters declared by the header govern the rest of the message."""
        msg = encode_message([("MSH", {"encoding_characters": "$~\\&"}), ("PID", {"patient_name": ["DOE", "JO$E"]})])

        pid = msg.split("\r")[1]
        assert pid.split("|")[5] == "DOE$JO\\S\\E"

    def test_pre_encoded_header_sets_delimiters(self):
        """Test a pre-encoded MSH line also decides the delimiters."""
        msg = encode_message(["MSH#^~\\&#A", ("EVN", {"event_type_code": "A01"})])

        assert msg.split("\r")[1] == "EVN#A01#####"

    def test_unknown_segment_fails_whole_message(self):
        """Test nothing is returned when one segment cannot be encoded."""
        with pytest.raises(UnknownSegmentType):
            encode_message([("MSH", HEADER_VALUES), ("ZZZ", {})])

    def test_encoder_binds_terminator_and_registry(self, pid_registry):
        """Test SegmentEncoder applies its bound settings."""
        pid_registry.register("MSH", [("encoding_characters", 2), ("sending_application", 3)])
        encoder = SegmentEncoder(registry=pid_registry, terminator="\n")

        msg = encoder.encode_message([("MSH", {"sending_application": "APP"}), ("PID", PATIENT_VALUES)])

        assert msg == "MSH|^~\\&|APP\nPID|||56782445^^^UAReg^PI||KLEINSAMPLE^BARRY^Q^JR||19620910|M"
        assert encoder.encode_segment("PID", {}) == "PID||||||||"

    def test_encoder_rejects_bad_delimiters(self):
        """Test invalid delimiters fail when the encoder is built."""
        with pytest.raises(InvalidDelimiterConfiguration):
            SegmentEncoder(delimiters=Delimiters(field="^"))
