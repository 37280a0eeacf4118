"""Host services the provider depends on.

The provider never touches the filesystem or spawns processes directly; it
goes through these executers so a host can run p4 and copy files on a remote
agent. ``perforce_bridge.agents.local`` implements both for the local machine.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

from perforce_bridge.models.entries import TreeNode


@dataclass
class ProcessResult:
    """Outcome of a line-oriented process run.

    Attributes:
        exit_code: Process exit status
        output: stdout split into lines
        error: stderr split into lines
    """
    exit_code: int
    output: list[str] = field(default_factory=list)
    error: list[str] = field(default_factory=list)


class ProcessExecuter(ABC):
    """Spawns processes and captures their output."""

    @abstractmethod
    def execute(self, file_name: str, arguments: str) -> ProcessResult:
        """Run a process and capture stdout/stderr as text lines.

        Args:
            file_name: Executable to run
            arguments: Command-line argument string (quoted as for a shell)

        Returns:
            ProcessResult with exit code and output lines
        """
        pass

    @abstractmethod
    def execute_binary(self, file_name: str, arguments: str) -> tuple[bytes, bytes]:
        """Run a process and capture stdout and stderr as separate raw buffers.

        Args:
            file_name: Executable to run
            arguments: Command-line argument string (quoted as for a shell)

        Returns:
            Tuple of (stdout bytes, stderr bytes)
        """
        pass


class FileOperationsExecuter(ABC):
    """Filesystem operations on the machine that holds the client workspace."""

    @property
    @abstractmethod
    def directory_separator(self) -> str:
        """Separator character used by this filesystem."""
        pass

    @abstractmethod
    def combine_path(self, *parts: str) -> str:
        """Join path segments with this filesystem's separator."""
        pass

    @abstractmethod
    def read_file_bytes(self, path: str) -> bytes:
        pass

    @abstractmethod
    def delete_files(self, paths: Sequence[str]) -> None:
        pass

    @abstractmethod
    def clear_directory(self, path: str) -> None:
        """Remove everything inside ``path``, creating it if it does not exist."""
        pass

    @abstractmethod
    def create_directory(self, path: str) -> None:
        """Create ``path``; existing directories are left alone."""
        pass

    @abstractmethod
    def get_directory_entry(self, path: str, recurse: bool = True, include_root: bool = True) -> TreeNode:
        """List a directory tree.

        Args:
            path: Directory to list
            recurse: Descend into subdirectories
            include_root: Return ``path`` itself as the root node

        Returns:
            Root TreeNode; every node lists its files
        """
        pass

    @abstractmethod
    def file_copy_batch(
        self,
        source_root: str,
        source_files: Sequence[str],
        target_root: str,
        target_files: Sequence[str],
        overwrite: bool = True,
        create_directories: bool = True,
    ) -> None:
        """Copy many files in one call.

        ``source_files[i]`` (relative to ``source_root``) is copied to
        ``target_files[i]`` (relative to ``target_root``).
        """
        pass
