import struct

import pytest


class DummyProgress:
    """
    Test-only no-op progress object to avoid Rich LiveError from Live/Progress.

    Matches the Progress API usage in the codebase closely enough to stand in
    for Rich's Progress.
    """

    def __init__(self, *args, **kwargs):
        self.finished = False

    def add_task(self, *args, **kwargs):
        return "task-id"

    def update(self, *args, **kwargs):
        pass

    def advance(self, *args, **kwargs):
        pass

    def start(self):
        self.finished = False

    def stop(self):
        self.finished = True

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()


@pytest.fixture(autouse=True)
def dummy_progress(monkeypatch):
    """
    Patch perforce_bridge.utils.progress so tests never construct a real
    Rich Progress/Live instance (the mirror shows a progress bar).
    """
    from perforce_bridge.utils import progress as progress_utils

    def _create_progress_bar(description: str = "Processing", total=None):
        return DummyProgress(), "task-id"

    monkeypatch.setattr(progress_utils, "create_progress_bar", _create_progress_bar)
    # create_progress_bar may already be bound elsewhere; patch the class it builds too
    monkeypatch.setattr(progress_utils, "Progress", DummyProgress)

    yield


@pytest.fixture(autouse=True)
def reset_debug_logger():
    """Keep debug mode off unless a test turns it on."""
    from perforce_bridge.utils.debug import DebugLogger

    DebugLogger.configure(enabled=False, log_dir=None)
    yield
    DebugLogger.configure(enabled=False, log_dir=None)


def _encode_string(value: str) -> bytes:
    data = value.encode("utf-8")
    return b"s" + struct.pack("<i", len(data)) + data


def encode_records(*records: dict) -> bytes:
    """Encode dicts the way `p4 -G` does (str and int values only)."""
    out = b""
    for record in records:
        out += b"{"
        for key, value in record.items():
            out += _encode_string(key)
            if isinstance(value, int):
                out += b"i" + struct.pack("<i", value)
            else:
                out += _encode_string(value)
        out += b"0"
    return out


@pytest.fixture
def p4_marshal():
    """Encoder producing `p4 -G` stdout for the given records."""
    return encode_records
