"""Host executers for processes and file operations."""

from .base import FileOperationsExecuter, ProcessExecuter, ProcessResult
from .local import LocalFileOperationsExecuter, LocalProcessExecuter
