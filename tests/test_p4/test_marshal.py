"""Tests for the `p4 -G` record decoder."""

import base64
import struct

import pytest

from perforce_bridge.p4.exceptions import (
    InvalidDataError,
    ProtocolDecodeError,
    UnexpectedEndOfStreamError,
)
from perforce_bridge.p4.marshal import decode_records


def _string(value: str) -> bytes:
    data = value.encode("utf-8")
    return struct.pack("<i", len(data)) + data


class TestDecodeRecords:
    """Tests for well-formed streams."""

    def test_empty_buffer_yields_no_records(self):
        assert decode_records(b"") == []

    def test_single_record(self, p4_marshal):
        data = p4_marshal({"code": "stat", "data": "ok"})

        assert decode_records(data) == [{"code": "stat", "data": "ok"}]

    def test_integer_value_is_rendered_as_decimal(self):
        data = b"{" + b"s" + _string("change") + b"i" + struct.pack("<i", 42) + b"0"

        assert decode_records(data) == [{"change": "42"}]

    def test_negative_integer_value(self, p4_marshal):
        assert decode_records(p4_marshal({"delta": -7})) == [{"delta": "-7"}]

    def test_multiple_records_keep_stream_order(self, p4_marshal):
        data = p4_marshal(
            {"code": "stat", "name": "depot"},
            {"code": "stat", "name": "spec"},
            {"code": "stat", "name": "archive"},
        )

        names = [record["name"] for record in decode_records(data)]
        assert names == ["depot", "spec", "archive"]

    def test_empty_string_key_and_value(self, p4_marshal):
        assert decode_records(p4_marshal({"": ""})) == [{"": ""}]

    def test_utf8_values(self, p4_marshal):
        data = p4_marshal({"desc": "Überarbeitung ✓"})

        assert decode_records(data) == [{"desc": "Überarbeitung ✓"}]

    def test_duplicate_keys_last_write_wins(self):
        data = (
            b"{"
            + b"s" + _string("code") + b"s" + _string("info")
            + b"s" + _string("code") + b"s" + _string("stat")
            + b"0"
        )

        assert decode_records(data) == [{"code": "stat"}]

    def test_record_without_close_marker_at_end_of_stream(self):
        data = b"{" + b"s" + _string("code") + b"s" + _string("stat")

        assert decode_records(data) == [{"code": "stat"}]

    def test_trailing_close_marker_stops_decoding(self, p4_marshal):
        data = p4_marshal({"code": "stat"}) + b"0"

        assert decode_records(data) == [{"code": "stat"}]

    def test_empty_record(self):
        assert decode_records(b"{0") == [{}]


class TestDecodeErrors:
    """Tests for malformed streams."""

    def test_unknown_key_type(self):
        data = b"{x" + _string("code")

        with pytest.raises(InvalidDataError) as exc_info:
            decode_records(data)

        assert exc_info.value.offending_byte == ord("x")
        assert exc_info.value.offset == 1
        assert isinstance(exc_info.value, ProtocolDecodeError)

    def test_unknown_value_type(self):
        data = b"{s" + _string("code") + b"f" + struct.pack("<d", 1.5) + b"0"

        with pytest.raises(InvalidDataError, match="Unexpected value type"):
            decode_records(data)

    def test_unknown_record_marker(self, p4_marshal):
        data = p4_marshal({"code": "stat"}) + b"["

        with pytest.raises(InvalidDataError) as exc_info:
            decode_records(data)

        assert exc_info.value.offending_byte == ord("[")
        assert exc_info.value.remaining_base64 == base64.b64encode(b"[").decode("ascii")

    def test_invalid_data_carries_full_payload(self):
        data = b"{x"

        with pytest.raises(InvalidDataError) as exc_info:
            decode_records(data)

        assert base64.b64decode(exc_info.value.payload_base64) == data

    def test_truncated_string(self):
        data = b"{s" + struct.pack("<i", 10) + b"abc"

        with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
            decode_records(data)

        assert base64.b64decode(exc_info.value.payload_base64) == data
        assert isinstance(exc_info.value, ProtocolDecodeError)

    def test_truncated_length_prefix(self):
        with pytest.raises(UnexpectedEndOfStreamError):
            decode_records(b"{s\x05\x00")

    def test_truncated_integer(self):
        data = b"{s" + _string("change") + b"i\x01\x02"

        with pytest.raises(UnexpectedEndOfStreamError):
            decode_records(data)

    def test_missing_value_type(self):
        data = b"{s" + _string("code")

        with pytest.raises(UnexpectedEndOfStreamError):
            decode_records(data)

    def test_negative_string_length(self):
        data = b"{s" + struct.pack("<i", -1)

        with pytest.raises(InvalidDataError, match="Negative string length"):
            decode_records(data)
