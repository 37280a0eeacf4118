from .commands import ClientCommand
from .connection import ConnectionConfig
from .entries import DirectoryEntry, FileEntry, TreeNode
