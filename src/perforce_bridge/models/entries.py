"""Directory tree value types for depot browsing and local mirroring."""

from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """A file in a depot listing or a local directory tree.

    Attributes:
        name: Leaf segment (e.g. "main.c")
        path: Full path (depot-relative with "/", or a local path)
    """

    name: str = Field(..., description="Leaf file name")
    path: str = Field(..., description="Full path of the file")

    model_config = ConfigDict(frozen=True)


class DirectoryEntry(BaseModel):
    """A directory in a depot listing.

    Children are only populated at the level that was browsed; deeper
    levels are re-queried on demand, so ``None`` means "not loaded".

    Attributes:
        name: Leaf segment ("" for the depot root listing)
        path: Depot-relative path using "/" ("" for the root listing)
        subdirectories: Child directories, if loaded
        files: Child files, if loaded
    """

    name: str = Field(..., description="Leaf directory name")
    path: str = Field(..., description="Depot-relative path")
    subdirectories: Optional[List["DirectoryEntry"]] = Field(
        None, description="Child directories (None when not loaded)"
    )
    files: Optional[List[FileEntry]] = Field(
        None, description="Child files (None when not loaded)"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "proj",
                "path": "depot/proj",
                "subdirectories": [{"name": "src", "path": "depot/proj/src"}],
                "files": [{"name": "README", "path": "depot/proj/README"}],
            }
        },
    )


class TreeNode(BaseModel):
    """A node of a recursive directory listing returned by a file-operations executer.

    Attributes:
        path: Full path of the directory
        files: Files directly inside the directory (None when not listed)
        subdirectories: Child directory nodes
    """

    path: str = Field(..., description="Full path of the directory")
    files: Optional[List[FileEntry]] = Field(None, description="Files in this directory")
    subdirectories: List["TreeNode"] = Field(default_factory=list, description="Child nodes")

    def flatten(self) -> Iterator["TreeNode"]:
        """Yield this node followed by all descendants (pre-order)."""
        yield self
        for child in self.subdirectories:
            yield from child.flatten()


DirectoryEntry.model_rebuild()
TreeNode.model_rebuild()
