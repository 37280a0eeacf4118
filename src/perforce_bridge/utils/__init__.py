"""Utility modules for perforce-bridge."""

from perforce_bridge.utils.debug import DebugLogger
from perforce_bridge.utils.progress import (
    create_progress_bar,
    log_debug,
    log_error,
    log_info,
    log_success,
    log_warning,
    update_progress,
)

__all__ = [
    "DebugLogger",
    "create_progress_bar",
    "update_progress",
    "log_debug",
    "log_info",
    "log_warning",
    "log_error",
    "log_success",
]
