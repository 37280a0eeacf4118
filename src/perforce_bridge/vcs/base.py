"""Capability interfaces for source control providers.

A provider implements whichever capabilities its VCS supports:

- SourceFetcher: browse the repository and copy trees/files out of it
- Labeler: tag a tree with a label and fetch labeled snapshots
- CommandExecutor: run raw client commands with help lookup
"""

from abc import ABC, abstractmethod
from typing import Optional

from perforce_bridge.models.commands import ClientCommand
from perforce_bridge.models.entries import DirectoryEntry


class SourceFetcher(ABC):
    """Fetches source trees and files from a repository."""

    @abstractmethod
    def get_latest(self, source_path: str, target_path: str) -> None:
        """Copy the latest revision of ``source_path`` into ``target_path``.

        Args:
            source_path: Repository path (e.g. "depot/proj")
            target_path: Local directory; existing contents are replaced
        """
        pass

    @abstractmethod
    def get_directory_entry_info(self, source_path: str) -> DirectoryEntry:
        """Describe a repository directory ("" for the repository root)."""
        pass

    @abstractmethod
    def get_file_contents(self, file_path: str) -> bytes:
        """Return the latest contents of a single file."""
        pass

    @abstractmethod
    def validate_connection(self) -> None:
        """Raise if the repository cannot be reached."""
        pass


class Labeler(ABC):
    """Applies labels and fetches labeled snapshots."""

    @abstractmethod
    def apply_label(self, label: str, source_path: str) -> None:
        """Tag every file under ``source_path`` with ``label``."""
        pass

    @abstractmethod
    def get_labeled(self, label: str, source_path: str, target_path: str) -> None:
        """Copy ``source_path`` as of ``label`` into ``target_path``."""
        pass


class CommandExecutor(ABC):
    """Runs raw client commands."""

    @abstractmethod
    def get_available_commands(self) -> list[ClientCommand]:
        pass

    @abstractmethod
    def get_client_command_help(self, command_name: str) -> Optional[str]:
        """Return help text for a command, or None if unavailable."""
        pass

    @abstractmethod
    def execute_client_command(self, command_name: str, arguments: str) -> None:
        """Run a command, logging its output lines."""
        pass

    @abstractmethod
    def get_client_command_preview(self) -> str:
        """Return the connection options prepended to every command, password masked."""
        pass
