"""Executers that work against the local machine."""

import contextlib
import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Sequence, Union

from perforce_bridge.agents.base import FileOperationsExecuter, ProcessExecuter, ProcessResult
from perforce_bridge.models.entries import FileEntry, TreeNode


class LocalProcessExecuter(ProcessExecuter):
    """Runs processes with :mod:`subprocess`.

    Argument strings are split with :func:`shlex.split` on POSIX; on Windows
    the quoted command line is handed to CreateProcess unchanged.
    """

    def _command(self, file_name: str, arguments: str) -> Union[list[str], str]:
        if os.name == "nt":
            return f'"{file_name}" {arguments}'
        return [file_name, *shlex.split(arguments)]

    def execute(self, file_name: str, arguments: str) -> ProcessResult:
        result = subprocess.run(
            self._command(file_name, arguments),
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        return ProcessResult(
            exit_code=result.returncode,
            output=result.stdout.splitlines(),
            error=result.stderr.splitlines(),
        )

    def execute_binary(self, file_name: str, arguments: str) -> tuple[bytes, bytes]:
        """Run a process with stdout/stderr redirected to temporary files.

        Files are used instead of pipes so large ``-G`` captures never
        deadlock. Both files are removed afterwards, even on failure.
        """
        out_fd, out_name = tempfile.mkstemp(suffix="_p4")
        err_fd, err_name = tempfile.mkstemp(suffix="_p4")
        try:
            with os.fdopen(out_fd, "w+b") as out_file, os.fdopen(err_fd, "w+b") as err_file:
                subprocess.run(
                    self._command(file_name, arguments),
                    stdin=subprocess.DEVNULL,
                    stdout=out_file,
                    stderr=err_file,
                )
                out_file.seek(0)
                err_file.seek(0)
                return out_file.read(), err_file.read()
        finally:
            for name in (out_name, err_name):
                with contextlib.suppress(OSError):
                    os.remove(name)


class LocalFileOperationsExecuter(FileOperationsExecuter):
    """File operations on the local filesystem using pathlib and shutil."""

    @property
    def directory_separator(self) -> str:
        return os.sep

    def combine_path(self, *parts: str) -> str:
        return os.path.join(*(part for part in parts if part))

    def read_file_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def delete_files(self, paths: Sequence[str]) -> None:
        for path in paths:
            Path(path).unlink(missing_ok=True)

    def clear_directory(self, path: str) -> None:
        directory = Path(path)
        if not directory.exists():
            directory.mkdir(parents=True)
            return

        for child in directory.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()

    def create_directory(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def get_directory_entry(self, path: str, recurse: bool = True, include_root: bool = True) -> TreeNode:
        """List ``path`` as a TreeNode.

        With ``include_root=False`` the root node carries no files of its own;
        with ``recurse=False`` child directories are returned unlisted.
        """
        root = Path(path)
        if not root.is_dir():
            raise FileNotFoundError(f"Directory not found: {path}")
        return self._list(root, recurse=recurse, list_files=include_root)

    def _list(self, directory: Path, recurse: bool, list_files: bool) -> TreeNode:
        files: list[FileEntry] = []
        subdirectories: list[TreeNode] = []

        for child in sorted(directory.iterdir(), key=lambda p: p.name):
            if child.is_dir():
                if recurse:
                    subdirectories.append(self._list(child, recurse=True, list_files=True))
                else:
                    subdirectories.append(TreeNode(path=str(child)))
            elif list_files:
                files.append(FileEntry(name=child.name, path=str(child)))

        return TreeNode(
            path=str(directory),
            files=files if list_files else None,
            subdirectories=subdirectories,
        )

    def file_copy_batch(
        self,
        source_root: str,
        source_files: Sequence[str],
        target_root: str,
        target_files: Sequence[str],
        overwrite: bool = True,
        create_directories: bool = True,
    ) -> None:
        if len(source_files) != len(target_files):
            raise ValueError(
                f"Source/target count mismatch: {len(source_files)} != {len(target_files)}"
            )

        for source_name, target_name in zip(source_files, target_files):
            source = Path(source_root) / source_name
            target = Path(target_root) / target_name

            if create_directories:
                target.parent.mkdir(parents=True, exist_ok=True)
            if target.exists() and not overwrite:
                continue
            shutil.copy2(source, target)
