"""Error classification for decoded p4 records."""

from enum import IntEnum
from typing import Sequence

from perforce_bridge.p4.exceptions import P4ConnectionError
from perforce_bridge.utils.progress import log_debug, log_warning

DEFAULT_ERROR_MESSAGE = "An unknown error occured."


class Severity(IntEnum):
    """p4 message severities as reported in the ``severity`` field."""

    EMPTY = 0  # No error
    INFO = 1  # Informational message only
    WARN = 2  # Warning message only
    FAILED = 3  # Command failed
    FATAL = 4  # Severe error; cannot continue


def parse_severity(value) -> int:
    """Best-effort integer severity; anything unparsable counts as EMPTY."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return Severity.EMPTY


def classify_records(records: Sequence[dict[str, str]]) -> Sequence[dict[str, str]]:
    """Raise on the first record reporting a failed or fatal error.

    Info and warning records are passed through untouched.

    Args:
        records: Decoded records from one p4 invocation

    Returns:
        The same records

    Raises:
        P4ConnectionError: A record has code "error" and severity >= FAILED
    """
    for record in records:
        if record.get("code") != "error":
            continue

        message = record.get("data", DEFAULT_ERROR_MESSAGE)
        severity = parse_severity(record.get("severity", "0"))

        if severity >= Severity.FAILED:
            raise P4ConnectionError(message, severity=severity)

        if severity == Severity.WARN:
            log_warning(message.rstrip())
        else:
            log_debug(f"p4 reported severity {severity}: {message.rstrip()}")

    return records
