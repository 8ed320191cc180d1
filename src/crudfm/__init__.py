"""crudfm - typed, serialized CRUD over named subdirectories.

Directories are addressed by a well-known base directory plus an ordered list
of Segment enum members; files by the same plus a file name.
"""

__version__ = "1.0.0"

from crudfm.core.config import ConfigResolver
from crudfm.core.errors import (
    ConfigError,
    CrudFMError,
    DirectoryCreationFailedError,
    ErrorKind,
    FileCreationFailedError,
    FileError,
    FileReadFailedError,
    InvalidSegmentError,
    PathAlreadyExistsError,
    PathDoesNotExistError,
    PathResolutionFailedError,
    StorageError,
)
from crudfm.storage import (
    AsyncFileManager,
    BaseDirectory,
    BaseDirectoryService,
    FileManager,
    Outcome,
    Segment,
    attempt,
    attempt_async,
)

__all__ = [
    # Storage
    "AsyncFileManager",
    "BaseDirectory",
    "BaseDirectoryService",
    "FileManager",
    "Outcome",
    "Segment",
    "attempt",
    "attempt_async",
    # Config
    "ConfigResolver",
    # Errors
    "CrudFMError",
    "ConfigError",
    "FileError",
    "StorageError",
    "ErrorKind",
    "PathDoesNotExistError",
    "PathAlreadyExistsError",
    "FileCreationFailedError",
    "FileReadFailedError",
    "DirectoryCreationFailedError",
    "PathResolutionFailedError",
    "InvalidSegmentError",
]
