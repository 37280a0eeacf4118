"""Decoder for the ``p4 -G`` structured output format.

``p4 -G`` writes each result as a marshalled Python dictionary. Only the
subset p4 actually emits is supported:

    '{'  record open
    's' <int32 length> <utf-8 bytes>    string key or value
    'i' <int32>                          integer value
    '0'  record close

All integers are little-endian and signed. Integer values are rendered as
decimal strings so every record is a flat ``dict[str, str]``.
"""

import struct
from typing import Optional

from perforce_bridge.p4.exceptions import InvalidDataError, UnexpectedEndOfStreamError

Record = dict[str, str]

RECORD_OPEN = ord("{")
RECORD_CLOSE = ord("0")
TYPE_STRING = ord("s")
TYPE_INT = ord("i")

_INT32 = struct.Struct("<i")


class _RecordReader:
    """Cursor over a captured stdout buffer."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def read_tag(self) -> Optional[int]:
        """Return the next byte, or None at end of stream."""
        if self.pos >= len(self.data):
            return None
        tag = self.data[self.pos]
        self.pos += 1
        return tag

    def read_bytes(self, count: int) -> bytes:
        end = self.pos + count
        if end > len(self.data):
            raise UnexpectedEndOfStreamError(
                f"Expected {count} bytes at offset {self.pos}, "
                f"only {len(self.data) - self.pos} remain",
                self.data,
                self.pos,
            )
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def read_int32(self) -> int:
        return _INT32.unpack(self.read_bytes(_INT32.size))[0]

    def read_string(self) -> str:
        length_offset = self.pos
        length = self.read_int32()
        if length == 0:
            return ""
        if length < 0:
            raise InvalidDataError(
                f"Negative string length: {length}", self.data, length_offset, None
            )
        return self.read_bytes(length).decode("utf-8", errors="replace")

    def invalid(self, message: str, tag: int) -> InvalidDataError:
        return InvalidDataError(message, self.data, self.pos - 1, tag)


def _read_record(reader: _RecordReader) -> Record:
    record: Record = {}

    key_type = reader.read_tag()
    while key_type is not None and key_type != RECORD_CLOSE:
        if key_type != TYPE_STRING:
            raise reader.invalid(f"Unexpected key type: {key_type}", key_type)
        key = reader.read_string()

        value_type = reader.read_tag()
        if value_type is None:
            raise UnexpectedEndOfStreamError(
                f"Missing value type for key {key!r}", reader.data, reader.pos
            )
        if value_type == TYPE_STRING:
            value = reader.read_string()
        elif value_type == TYPE_INT:
            value = str(reader.read_int32())
        else:
            raise reader.invalid(f"Unexpected value type: {value_type}", value_type)

        # Last write wins for duplicate keys
        record[key] = value
        key_type = reader.read_tag()

    return record


def decode_records(data: bytes) -> list[Record]:
    """Decode every record in a ``p4 -G`` stdout capture.

    Args:
        data: Raw stdout bytes (may be empty)

    Returns:
        Records in stream order; an empty buffer yields an empty list

    Raises:
        InvalidDataError: An unknown record, key or value tag was found
        UnexpectedEndOfStreamError: The buffer ends inside a key or value
    """
    reader = _RecordReader(data)
    records: list[Record] = []

    while True:
        marker = reader.read_tag()
        if marker is None or marker == RECORD_CLOSE:
            break
        if marker != RECORD_OPEN:
            raise reader.invalid(f"Unexpected record marker: {marker}", marker)
        records.append(_read_record(reader))

    return records
