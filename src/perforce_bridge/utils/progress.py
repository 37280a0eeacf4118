"""Console logging and progress helpers shared by the provider and the CLI."""

import sys
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .debug import DebugLogger

# Consoles that cannot encode the symbols get ASCII fallbacks
_ASCII_ONLY = (getattr(sys.stderr, "encoding", None) or "ascii").lower() in ("cp1252", "cp850", "ascii")

SYMBOLS = {
    "info": "i" if _ASCII_ONLY else "\u2139",
    "warning": "!" if _ASCII_ONLY else "\u26a0",
    "error": "X" if _ASCII_ONLY else "\u2717",
    "success": "v" if _ASCII_ONLY else "\u2713",
    "debug": "." if _ASCII_ONLY else "\u00b7",
}

# All diagnostics go to stderr so `cat` can stream file contents on stdout
console = Console(stderr=True, legacy_windows=False)
error_console = Console(stderr=True, legacy_windows=False)


def create_progress_bar(description: str = "Processing", total: Optional[int] = None) -> tuple[Progress, TaskID]:
    """Create a progress bar.

    Args:
        description: Description text for the progress bar
        total: Total number of items (None for indeterminate)

    Returns:
        Tuple of (Progress instance, TaskID) for updating
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )

    task_id = progress.add_task(description, total=total)
    return progress, task_id


def update_progress(
    progress: Progress,
    task_id: TaskID,
    advance: int = 1,
    description: Optional[str] = None,
) -> None:
    """Advance a progress bar, optionally replacing its description."""
    if description:
        progress.update(task_id, description=description)
    progress.advance(task_id, advance)


def log_debug(message: str, **kwargs: Any) -> None:
    """Log a debug message; printed only when debug mode is enabled.

    Args:
        message: Message to log (not interpreted as rich markup)
        **kwargs: Additional arguments passed to rich console
    """
    if not DebugLogger.is_enabled():
        return
    console.print(f"[dim]{SYMBOLS['debug']} {escape(message)}[/dim]", **kwargs)


def log_info(message: str, **kwargs: Any) -> None:
    """Log an info message.

    Args:
        message: Message to log
        **kwargs: Additional arguments passed to rich console
    """
    console.print(f"[blue]{SYMBOLS['info']}[/blue] {escape(message)}", **kwargs)


def log_warning(message: str, **kwargs: Any) -> None:
    """Log a warning message."""
    console.print(f"[yellow]{SYMBOLS['warning']}[/yellow] {escape(message)}", **kwargs)


def log_error(message: str, **kwargs: Any) -> None:
    """Log an error message."""
    error_console.print(f"[red]{SYMBOLS['error']}[/red] {escape(message)}", **kwargs)


def log_success(message: str, **kwargs: Any) -> None:
    """Log a success message."""
    console.print(f"[green]{SYMBOLS['success']}[/green] {escape(message)}", **kwargs)
