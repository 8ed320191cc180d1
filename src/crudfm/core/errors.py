"""Error handling with friendly messages."""

from __future__ import annotations

from enum import StrEnum


class CrudFMError(Exception):
    """Base exception for all crudfm errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(CrudFMError):
    """Configuration error."""

    pass


class FileError(CrudFMError):
    """File operation error."""

    pass


class ErrorKind(StrEnum):
    """Closed set of storage failure kinds callers can match on."""

    PATH_DOES_NOT_EXIST = "path_does_not_exist"
    PATH_ALREADY_EXISTS = "path_already_exists"
    FILE_CREATION_FAILED = "file_creation_failed"
    FILE_READ_FAILED = "file_read_failed"
    DIRECTORY_CREATION_FAILED = "directory_creation_failed"
    PATH_RESOLUTION_FAILED = "path_resolution_failed"
    INVALID_SEGMENT = "invalid_segment"


class StorageError(FileError):
    """Storage operation error carrying the offending path."""

    kind: ErrorKind

    def __init__(self, path: str, message: str, suggestion: str | None = None) -> None:
        self.path = path
        super().__init__(message, suggestion)


class PathDoesNotExistError(StorageError):
    """Required target is absent."""

    kind = ErrorKind.PATH_DOES_NOT_EXIST

    def __init__(self, path: str) -> None:
        super().__init__(path, f"Path does not exist: {path}")


class PathAlreadyExistsError(StorageError):
    """File creation target is already present."""

    kind = ErrorKind.PATH_ALREADY_EXISTS

    def __init__(self, path: str) -> None:
        super().__init__(
            path,
            f"Path already exists: {path}",
            "Use update_file to replace existing contents",
        )


class FileCreationFailedError(StorageError):
    """Writing a new file failed."""

    kind = ErrorKind.FILE_CREATION_FAILED

    def __init__(self, path: str) -> None:
        super().__init__(
            path,
            f"File creation failed at path: {path}",
            "Check that the parent directory exists and is writable",
        )


class FileReadFailedError(StorageError):
    """Reading an existing target failed."""

    kind = ErrorKind.FILE_READ_FAILED

    def __init__(self, path: str) -> None:
        super().__init__(path, f"File read failed at path: {path}")


class DirectoryCreationFailedError(StorageError):
    """Creating a directory failed."""

    kind = ErrorKind.DIRECTORY_CREATION_FAILED

    def __init__(self, path: str) -> None:
        super().__init__(
            path,
            f"Directory creation failed at path: {path}",
            "Check permissions and available disk space",
        )


class PathResolutionFailedError(StorageError):
    """Base directory could not be resolved or created."""

    kind = ErrorKind.PATH_RESOLUTION_FAILED

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"Path resolution failed for base directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(path, message, "Check the storage.roots configuration")


class InvalidSegmentError(StorageError):
    """Segment label or file name is not a single path component."""

    kind = ErrorKind.INVALID_SEGMENT

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"Invalid path segment {path!r}: {reason}")
