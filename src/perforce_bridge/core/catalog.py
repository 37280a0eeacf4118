"""Depot browsing built on p4 depots/dirs/files/info."""

from perforce_bridge.models.connection import ConnectionConfig
from perforce_bridge.models.entries import DirectoryEntry, FileEntry
from perforce_bridge.p4.exceptions import OperationalError
from perforce_bridge.p4.runner import P4CommandRunner

DEPOT_SEPARATOR = "/"


def last_segment(path: str) -> str:
    """Return the part of a depot path after the last "/"."""
    return path[path.rfind(DEPOT_SEPARATOR) + 1:]


class DepotCatalog:
    """Translates p4 listing records into directory entries.

    Paths passed in and returned are depot paths without the leading "//",
    e.g. "depot/proj/src".
    """

    def __init__(self, runner: P4CommandRunner, config: ConnectionConfig):
        self.runner = runner
        self.config = config

    def _p4(self, *args: str) -> list[dict[str, str]]:
        return self.runner.run(self.config, list(args))

    def list_depots(self) -> list[DirectoryEntry]:
        """List every depot as a top-level directory (children not loaded)."""
        depots = []
        for record in self._p4("depots"):
            name = record.get("name")
            if name:
                depots.append(DirectoryEntry(name=name, path=name))
        return depots

    def list_directories(self, path: str) -> list[DirectoryEntry]:
        """List the immediate subdirectories of a depot path."""
        entries = []
        for record in self._p4("dirs", f"//{path}/*"):
            name = record.get("dir")
            if not name:
                continue
            name = last_segment(name)
            entries.append(DirectoryEntry(name=name, path=f"{path}/{name}"))
        return entries

    def list_files(self, path: str) -> list[FileEntry]:
        """List the files directly inside a depot path."""
        entries = []
        for record in self._p4("files", f"//{path}/*"):
            name = record.get("depotFile")
            if not name:
                continue
            name = last_segment(name)
            entries.append(FileEntry(name=name, path=f"{path}/{name}"))
        return entries

    def get_root_path(self) -> str:
        """Return the client workspace root reported by ``p4 info``.

        Raises:
            OperationalError: If p4 info does not report a clientRoot
        """
        results = self._p4("info")
        if results and "clientRoot" in results[0]:
            return results[0]["clientRoot"]

        raise OperationalError("clientRoot is null")

    def browse(self, path: str) -> DirectoryEntry:
        """Describe a depot path with its subdirectories and files.

        An empty path lists the depots.
        """
        path = (path or "").strip(DEPOT_SEPARATOR)

        if not path:
            return DirectoryEntry(name="", path="", subdirectories=self.list_depots(), files=[])

        return DirectoryEntry(
            name=last_segment(path),
            path=path,
            subdirectories=self.list_directories(path),
            files=self.list_files(path),
        )
