"""Debug capture of p4 invocations as JSON files.

Each p4 call leaves a request capture (executable and masked arguments) and
a response capture (records, stderr or the undecodable payload) under
``<log_dir>/<category>/``. Both carry the same request id.
"""

import base64
import contextlib
import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


class DebugLogger:
    """Process-wide capture of p4 requests and responses (singleton pattern)."""

    _enabled: bool = False
    _log_dir: Optional[Path] = None
    _lock = threading.Lock()

    @classmethod
    def configure(cls, enabled: bool = False, log_dir: Optional[Path] = None) -> None:
        """Turn capturing on or off.

        Args:
            enabled: Whether captures are written
            log_dir: Directory for capture files (default: ~/.perforce-bridge/logs)
        """
        with cls._lock:
            cls._enabled = enabled
            cls._log_dir = log_dir or Path.home() / ".perforce-bridge" / "logs"

            if cls._enabled:
                cls._log_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def is_enabled(cls) -> bool:
        return cls._enabled

    @classmethod
    def log_request(cls, operation: str, payload: Dict[str, Any], request_id: Optional[str] = None, category: str = "p4") -> str:
        """Capture the command about to run.

        Args:
            operation: p4 command name (e.g. "sync", "depots")
            payload: Executable and display arguments
            request_id: Id to reuse; a new UUID when omitted
            category: Subdirectory of the log directory

        Returns:
            The request id, to pass to :meth:`log_response`
        """
        if request_id is None:
            request_id = str(uuid.uuid4())

        if cls._enabled:
            cls._write("request", operation, payload, request_id, category)
        return request_id

    @classmethod
    def log_response(cls, operation: str, payload: Dict[str, Any], request_id: Optional[str] = None, category: str = "p4") -> None:
        """Capture what the command returned (records, stderr or a decode failure)."""
        if not cls._enabled:
            return

        cls._write("response", operation, payload, request_id or str(uuid.uuid4()), category)

    @classmethod
    def _write(cls, capture_type: str, operation: str, payload: Dict[str, Any], request_id: str, category: str) -> None:
        if not cls._log_dir:
            return

        category_dir = cls._log_dir / category
        category_dir.mkdir(parents=True, exist_ok=True)

        # e.g. sync_20251029T054015Z_1a2b_request.json
        now = datetime.now(timezone.utc)
        filepath = category_dir / f"{operation}_{now.strftime('%Y%m%dT%H%M%SZ')}_{request_id[:4]}_{capture_type}.json"

        entry = {
            "timestamp": now.isoformat(),
            "type": capture_type,
            "operation": operation,
            "request_id": request_id,
            "payload": payload,
        }

        # A failed capture must never fail the p4 call
        with cls._lock, contextlib.suppress(OSError):
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(entry, f, indent=2, default=cls._to_json)

    @staticmethod
    def _to_json(obj: Any) -> str:
        """Render raw p4 output as base64 and datetimes as ISO 8601; anything else via str()."""
        if isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(bytes(obj)).decode("ascii")
        if isinstance(obj, datetime):
            return obj.isoformat()
        return str(obj)
