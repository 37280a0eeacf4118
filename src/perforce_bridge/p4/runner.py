"""Runs p4 commands and returns their decoded, classified records."""

import re
from typing import Sequence

from perforce_bridge.agents.base import ProcessExecuter
from perforce_bridge.models.connection import ConnectionConfig
from perforce_bridge.p4.classifier import classify_records
from perforce_bridge.p4.exceptions import P4ConnectionError, ProtocolDecodeError
from perforce_bridge.p4.marshal import Record, decode_records
from perforce_bridge.utils.debug import DebugLogger
from perforce_bridge.utils.progress import log_debug

PASSWORD_MASK = "XXXXXXX"

_QUOTE_RUN = re.compile(r'(\\*)"')
_TRAILING_BACKSLASHES = re.compile(r"(\\+)\Z")
_NEEDS_QUOTING = re.compile(r"[\s\"'\\]")


def quote_argument(value: str) -> str:
    """Wrap a value in double quotes for the p4 command line.

    Embedded quotes and the backslashes in front of them are escaped so the
    value reads back unchanged with :func:`shlex.split` (POSIX) and with the
    CreateProcess rules (Windows).
    """
    escaped = _QUOTE_RUN.sub(lambda m: m.group(1) * 2 + '\\"', value)
    escaped = _TRAILING_BACKSLASHES.sub(lambda m: m.group(1) * 2, escaped)
    return f'"{escaped}"'


def join_arguments(args: Sequence[str]) -> str:
    """Join free-form arguments, quoting only those that need it."""
    return " ".join(
        quote_argument(arg) if not arg or _NEEDS_QUOTING.search(arg) else arg
        for arg in args
    )


def build_arguments(config: ConnectionConfig, structured_output: bool, hide_password: bool) -> str:
    """Build the global p4 options for a connection.

    Each option is followed by a space so positional arguments can be
    appended directly.

    Args:
        config: Connection settings; empty fields are left off
        structured_output: Prepend -G to request marshalled output
        hide_password: Replace the password with a fixed mask (display only)

    Returns:
        Argument string such as ``-G -c "ws" -p "perforce:1666" ``
    """
    parts = []

    if structured_output:
        parts.append("-G ")
    if config.client_name:
        parts.append(f"-c {quote_argument(config.client_name)} ")
    if config.server_name:
        parts.append(f"-p {quote_argument(config.server_name)} ")
    if config.user_name:
        parts.append(f"-u {quote_argument(config.user_name)} ")
    if config.password:
        parts.append(f"-P {quote_argument(PASSWORD_MASK if hide_password else config.password)} ")

    return "".join(parts)


def append_arguments(base: str, args: Sequence[str]) -> str:
    """Append quoted positional arguments, each followed by a space."""
    return base + "".join(f"{quote_argument(arg)} " for arg in args)


class P4CommandRunner:
    """Executes ``p4 -G`` through a process executer.

    Example:
        >>> runner = P4CommandRunner(LocalProcessExecuter())
        >>> records = runner.run(config, ["depots"])
    """

    def __init__(self, process_executer: ProcessExecuter):
        self.process_executer = process_executer

    def run(self, config: ConnectionConfig, args: Sequence[str]) -> list[Record]:
        """Run one p4 command and return its records.

        Args:
            config: Connection settings
            args: p4 command and its arguments, e.g. ["sync", "//depot/..."]

        Returns:
            Decoded records (info/warning records included)

        Raises:
            P4ConnectionError: p4 wrote to stderr, could not be started, or
                reported a failed/fatal error
            ProtocolDecodeError: stdout is not valid ``-G`` output
        """
        arguments = append_arguments(build_arguments(config, True, False), args)
        display_arguments = append_arguments(build_arguments(config, True, True), args)

        log_debug(f"Executing {config.exe_path}")
        log_debug(f"  Arguments: {display_arguments}")

        operation = args[0] if args else "p4"
        request_id = DebugLogger.log_request(operation, {
            "executable": config.exe_path,
            "arguments": display_arguments,
        })

        try:
            stdout, stderr = self.process_executer.execute_binary(config.exe_path, arguments)
        except (OSError, ValueError) as e:
            raise P4ConnectionError(f"Unable to run {config.exe_path}: {e}") from e

        if stderr:
            message = stderr.decode("utf-8", errors="replace")
            DebugLogger.log_response(operation, {"stderr": message}, request_id)
            raise P4ConnectionError(message)

        log_debug(f"Parsing {len(stdout)} bytes of data.")

        try:
            records = decode_records(stdout)
        except ProtocolDecodeError as e:
            DebugLogger.log_response(operation, {
                "error": str(e),
                "payload_base64": e.payload_base64,
            }, request_id)
            raise

        DebugLogger.log_response(operation, {
            "record_count": len(records),
            "records": records,
        }, request_id)

        classify_records(records)
        return records
