"""Storage service package."""

from .aio import AsyncFileManager
from .locks import FifoLock
from .manager import FileManager
from .paths import BaseDirectoryService, resolve_directory, resolve_file
from .result import Outcome, attempt, attempt_async
from .types import BaseDirectory, Segment

__all__ = [
    "AsyncFileManager",
    "BaseDirectory",
    "BaseDirectoryService",
    "FifoLock",
    "FileManager",
    "Outcome",
    "Segment",
    "attempt",
    "attempt_async",
    "resolve_directory",
    "resolve_file",
]
