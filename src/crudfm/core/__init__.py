"""Core services: configuration, errors, logging and diagnostics."""

from crudfm.core.config import ConfigResolver, ConfigSource, LoggingPolicy
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
from crudfm.core.events import EventBus, get_event_bus
from crudfm.core.logging import (
    VerbosityLevel,
    apply_logging_policy,
    get_colors,
    get_logger,
    get_verbosity,
    set_colors,
    set_echo,
    set_verbosity,
)

__all__ = [
    # Config
    "ConfigResolver",
    "ConfigSource",
    "LoggingPolicy",
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
    # Events
    "EventBus",
    "get_event_bus",
    # Logging
    "VerbosityLevel",
    "apply_logging_policy",
    "get_colors",
    "get_logger",
    "get_verbosity",
    "set_colors",
    "set_echo",
    "set_verbosity",
]
