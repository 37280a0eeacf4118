"""Exceptions raised while talking to the Perforce client."""

import base64
from typing import Optional


class PerforceBridgeError(Exception):
    """Base exception for all perforce-bridge errors."""
    pass


class ProtocolDecodeError(PerforceBridgeError):
    """Raised when ``p4 -G`` output cannot be decoded.

    Attributes:
        payload_base64: The complete captured stdout, base64 encoded
    """

    def __init__(self, message: str, payload: bytes = b""):
        self.payload_base64 = base64.b64encode(payload).decode("ascii")
        super().__init__(message)


class InvalidDataError(ProtocolDecodeError):
    """Raised when an unexpected type tag is found in the stream."""

    def __init__(self, message: str, payload: bytes, offset: int, offending_byte: Optional[int]):
        """Initialize exception.

        Args:
            message: Description of what was expected
            payload: The complete captured stdout
            offset: Position of the offending byte
            offending_byte: The unexpected byte value
        """
        self.offset = offset
        self.offending_byte = offending_byte
        self.remaining_base64 = base64.b64encode(payload[offset:]).decode("ascii")
        super().__init__(message, payload)


class UnexpectedEndOfStreamError(ProtocolDecodeError):
    """Raised when the stream ends in the middle of a key or value."""

    def __init__(self, message: str, payload: bytes, offset: int):
        self.offset = offset
        super().__init__(message, payload)


class P4ConnectionError(PerforceBridgeError):
    """Raised when p4 writes to stderr or reports a failed/fatal error.

    Attributes:
        severity: p4 severity of the reported error (None for stderr failures)
    """

    def __init__(self, message: str, severity: Optional[int] = None):
        self.severity = severity
        super().__init__(message)


class OperationalError(PerforceBridgeError):
    """Raised when p4 output lacks a field the provider depends on."""
    pass
