"""Mirrors a synced workspace directory onto a target directory."""

from typing import Iterable

from perforce_bridge.agents.base import FileOperationsExecuter
from perforce_bridge.utils.progress import create_progress_bar, log_debug, update_progress


def relative_path(root: str, path: str, separator: str = "/") -> str:
    """Strip ``root`` (and the separator after it) from ``path``.

    A path that is not longer than the prefix (the root itself) yields "".

    Args:
        root: Root directory path
        path: Path of an entry under ``root``
        separator: Directory separator of the filesystem holding ``root``

    Returns:
        Path relative to ``root``
    """
    prefix_length = len(root) if root.endswith(("/", separator)) else len(root) + 1
    if prefix_length < len(path):
        return path[prefix_length:]
    return ""


def order_by_depth(paths: Iterable[str], separator: str = "/") -> list[str]:
    """Sort paths shallowest first (stable within the same depth).

    A directory always has fewer separators than its children, so creating
    directories in this order never needs a missing parent.
    """
    return sorted(paths, key=lambda p: p.count(separator))


def mirror_tree(file_ops: FileOperationsExecuter, source_path: str, target_path: str) -> None:
    """Replace the contents of ``target_path`` with a copy of ``source_path``.

    Steps: clear the target, list the source recursively, create every
    directory shallowest first, then copy all files in one batch.

    Args:
        file_ops: File operations executer for the machine holding both paths
        source_path: Directory to copy from (the synced workspace directory)
        target_path: Directory to copy into; existing contents are discarded
    """
    file_ops.clear_directory(target_path)

    root_entry = file_ops.get_directory_entry(source_path, recurse=True, include_root=True)
    separator = file_ops.directory_separator
    nodes = list(root_entry.flatten())

    directories = order_by_depth(
        (relative_path(source_path, node.path, separator) for node in nodes),
        separator,
    )
    file_names = order_by_depth(
        (
            relative_path(source_path, entry.path, separator)
            for node in nodes
            for entry in (node.files or [])
        ),
        separator,
    )

    log_debug(
        f"Mirroring {len(directories)} directories and {len(file_names)} files "
        f"from {source_path} to {target_path}"
    )

    progress, task_id = create_progress_bar("Creating directories", total=len(directories))
    with progress:
        for directory in directories:
            file_ops.create_directory(file_ops.combine_path(target_path, directory))
            update_progress(progress, task_id)

    file_ops.file_copy_batch(
        source_path,
        file_names,
        target_path,
        file_names,
        overwrite=True,
        create_directories=True,
    )
