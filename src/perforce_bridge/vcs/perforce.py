"""Perforce provider implementation.

This module provides the Perforce implementation of the SourceFetcher,
Labeler and CommandExecutor capabilities. It drives the p4 CLI with
``-G`` (marshalled output) through an injected process executer and copies
synced files with an injected file-operations executer.
"""

from typing import Optional

from perforce_bridge.agents.base import FileOperationsExecuter, ProcessExecuter
from perforce_bridge.core.catalog import DEPOT_SEPARATOR, DepotCatalog
from perforce_bridge.core.commands import load_available_commands
from perforce_bridge.core.mirror import mirror_tree
from perforce_bridge.models.commands import ClientCommand
from perforce_bridge.models.connection import ConnectionConfig
from perforce_bridge.models.entries import DirectoryEntry
from perforce_bridge.p4.exceptions import P4ConnectionError
from perforce_bridge.p4.runner import P4CommandRunner, build_arguments, quote_argument
from perforce_bridge.utils.progress import log_debug, log_error, log_info
from perforce_bridge.vcs.base import CommandExecutor, Labeler, SourceFetcher


class PerforceProvider(SourceFetcher, Labeler, CommandExecutor):
    """Perforce source control provider.

    Depot paths are given without the leading "//" (e.g. "depot/proj/src").
    Fetch operations sync into the client workspace first, then mirror the
    synced directory into the target.

    Example:
        >>> provider = PerforceProvider(
        ...     ConnectionConfig(client_name="build-ws", server_name="perforce:1666"),
        ...     LocalFileOperationsExecuter(),
        ...     LocalProcessExecuter(),
        ... )
        >>> provider.get_latest("depot/proj", "/tmp/proj")
    """

    directory_separator = DEPOT_SEPARATOR
    supports_command_help = True

    def __init__(
        self,
        config: ConnectionConfig,
        file_ops: FileOperationsExecuter,
        process_executer: ProcessExecuter,
        runner: Optional[P4CommandRunner] = None,
    ):
        """Initialize Perforce provider.

        Args:
            config: Immutable connection settings used for every p4 call
            file_ops: File operations on the machine holding the workspace
            process_executer: Process executer used to run p4
            runner: Optional pre-built command runner (defaults to one over process_executer)
        """
        self.config = config
        self.file_ops = file_ops
        self.process_executer = process_executer
        self.runner = runner or P4CommandRunner(process_executer)
        self.catalog = DepotCatalog(self.runner, config)
        self._commands = load_available_commands()

    def _p4(self, *args: str) -> list[dict[str, str]]:
        return self.runner.run(self.config, list(args))

    def _sync(self, file_spec: str) -> None:
        if self.config.use_force_sync:
            self._p4("sync", "-f", file_spec)
        else:
            self._p4("sync", file_spec)

    def _clean(self, path: Optional[str]) -> str:
        return (path or "").strip(self.directory_separator)

    def is_available(self) -> bool:
        return True

    def get_latest(self, source_path: str, target_path: str) -> None:
        source_path = self._clean(source_path)

        # "..." matches all files recursively
        self._sync(f"//{source_path}/...")
        self._copy_from_workspace(source_path, target_path)

    def get_labeled(self, label: str, source_path: str, target_path: str) -> None:
        source_path = self._clean(source_path)

        self._sync(f"//{source_path}/...@{label}")
        self._copy_from_workspace(source_path, target_path)

    def apply_label(self, label: str, source_path: str) -> None:
        source_path = self._clean(source_path)
        self._p4("tag", "-l", label, f"//{source_path}/...")

    def get_directory_entry_info(self, source_path: str) -> DirectoryEntry:
        return self.catalog.browse(source_path)

    def get_file_contents(self, file_path: str) -> bytes:
        """Sync a single depot file and return its bytes from the workspace.

        Args:
            file_path: Depot path of the file (e.g. "depot/proj/README")

        Returns:
            Raw file contents
        """
        file_path = self._clean(file_path)
        self._sync(f"//{file_path}")
        return self.file_ops.read_file_bytes(self.get_full_source_path(file_path))

    def validate_connection(self) -> None:
        self._p4("depots")

    def get_available_commands(self) -> list[ClientCommand]:
        return list(self._commands)

    def get_client_command_help(self, command_name: str) -> Optional[str]:
        results = self._p4("help", command_name)
        if results:
            return results[0].get("data")
        return None

    def get_client_command_preview(self) -> str:
        return build_arguments(self.config, structured_output=False, hide_password=True)

    def execute_client_command(self, command_name: str, arguments: str) -> None:
        """Run a raw p4 command, logging stdout as info and stderr as errors.

        The command runs without -G so its output is the normal text form.

        Args:
            command_name: p4 command (e.g. "changes")
            arguments: Free-form argument text appended verbatim

        Raises:
            P4ConnectionError: p4 could not be started or the argument text
                has unbalanced quotes
        """
        suffix = f"{quote_argument(command_name)} " + (arguments or "")
        command_line = build_arguments(self.config, False, False) + suffix
        log_debug(f"Executing {self.config.exe_path} {self.get_client_command_preview()}{suffix}")

        try:
            result = self.process_executer.execute(self.config.exe_path, command_line)
        except (OSError, ValueError) as e:
            raise P4ConnectionError(f"Unable to run {self.config.exe_path}: {e}") from e

        for line in result.output:
            log_info(line)

        for line in result.error:
            log_error(line)

    def get_full_source_path(self, source_path: str) -> str:
        """Map a depot path to its location in the client workspace.

        The leading depot segment is replaced by the client root and "/" is
        translated to the workspace filesystem's separator.

        Args:
            source_path: Depot path without "//" (e.g. "depot/proj/src")

        Returns:
            Local path (e.g. "/home/build/ws/proj/src")
        """
        source_path = self._clean(source_path)
        separator_index = source_path.find(self.directory_separator)
        without_depot = source_path[separator_index + 1:] if separator_index >= 0 else ""

        return self.file_ops.combine_path(
            self.catalog.get_root_path(),
            without_depot.replace(self.directory_separator, self.file_ops.directory_separator),
        )

    def _copy_from_workspace(self, source_path: str, target_path: str) -> None:
        full_source_path = self.get_full_source_path(source_path)

        log_debug(f"Copying from workspace ({full_source_path}) to target ({target_path})")
        mirror_tree(self.file_ops, full_source_path, target_path)

    def __str__(self) -> str:
        return "Provides functionality for getting files, browsing folders, and applying labels in Perforce."
