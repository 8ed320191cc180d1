"""Filesystem operations on resolved paths.

Every operation consults the existence gate before acting. The gate is a
snapshot: another process may change the path between the check and the
filesystem call.
"""

from __future__ import annotations

import contextlib
import os
import shutil
from pathlib import Path

from crudfm.core.errors import (
    DirectoryCreationFailedError,
    FileCreationFailedError,
    FileReadFailedError,
    PathAlreadyExistsError,
    PathDoesNotExistError,
)

Contents = bytes | bytearray | memoryview


def path_exists(path: Path) -> bool:
    # False on any OSError, including EACCES on a parent directory.
    return os.path.exists(path)


def as_bytes(contents: Contents) -> bytes:
    """Snapshot ``contents`` as bytes; only bytes-like objects are accepted."""
    if not isinstance(contents, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"contents must be bytes, bytearray or memoryview, not {type(contents).__name__}"
        )
    return bytes(contents)


def _require_exists(path: Path) -> None:
    if not path_exists(path):
        raise PathDoesNotExistError(str(path))


def create_directory_at(path: Path) -> Path:
    """Create ``path`` with intermediate parents. Existing targets are a no-op."""
    if path_exists(path):
        return path
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationFailedError(str(path)) from e
    return path


def create_file_at(path: Path, contents: Contents) -> Path:
    """Create a new file holding exactly ``contents``.

    The parent directory must already exist.
    """
    data = as_bytes(contents)
    if path_exists(path):
        raise PathAlreadyExistsError(str(path))

    try:
        f = open(path, "xb")
    except FileExistsError:
        raise PathAlreadyExistsError(str(path)) from None
    except OSError as e:
        raise FileCreationFailedError(str(path)) from e

    try:
        with f:
            f.write(data)
    except OSError as e:
        # Do not leave a truncated file behind.
        with contextlib.suppress(OSError):
            path.unlink()
        raise FileCreationFailedError(str(path)) from e
    return path


def read_file_at(path: Path) -> bytes:
    _require_exists(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileReadFailedError(str(path)) from e


def update_file_at(path: Path, contents: Contents) -> None:
    """Replace the whole file content (truncate, then write).

    Write failures propagate as ``OSError``.
    """
    data = as_bytes(contents)
    _require_exists(path)
    with open(path, "wb") as f:
        f.write(data)


def delete_file_at(path: Path) -> None:
    _require_exists(path)
    path.unlink()


def delete_directory_at(path: Path) -> None:
    """Remove ``path`` and everything below it."""
    _require_exists(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
