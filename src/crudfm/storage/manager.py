"""Serialized CRUD file manager.

Each operation comes in two forms: one addressed by
``(base, segments[, name])`` and one addressed by an already resolved path
(``*_at``). Both forms share one body per operation, so they behave
identically for equivalent paths. A segment form resolves inside its
observed block, so resolution failures are reported like any other.

All operations on one instance run one at a time, in arrival order. Share
one instance per logical storage root; separate instances do not coordinate.
"""

from __future__ import annotations

import time
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from crudfm.core.config import ConfigResolver
from crudfm.core.diagnostics import build_envelope
from crudfm.core.errors import StorageError
from crudfm.core.events import get_event_bus
from crudfm.core.logging import get_logger

from . import ops
from .locks import FifoLock
from .paths import BaseDirectoryService, resolve_directory, resolve_file
from .types import BaseDirectory, SegmentPath

_logger = get_logger(__name__)

PathLike = Path | str


def _short_traceback(*, max_lines: int = 20) -> str:
    tb_lines = traceback.format_exc().strip().splitlines()
    return "\n".join(tb_lines[-max_lines:])


def _safe_publish(event: str, payload: dict[str, Any]) -> None:
    try:
        get_event_bus().publish(event, payload)
    except Exception:
        # Diagnostics must never break a storage operation.
        return


@contextmanager
def _observe_operation(*, operation: str, base: dict[str, Any]) -> Iterator[dict[str, Any]]:
    start = time.perf_counter()
    _safe_publish(
        "operation.start",
        build_envelope(
            event="operation.start", component="storage", operation=operation, data=dict(base)
        ),
    )

    summary: dict[str, Any] = {}
    try:
        yield summary
    except Exception as e:
        duration_ms = int((time.perf_counter() - start) * 1000)
        end_data = dict(base)
        end_data.update(summary)
        end_data.update(
            {
                "status": "failed",
                "duration_ms": duration_ms,
                "error_type": type(e).__name__,
                "error_kind": e.kind.value if isinstance(e, StorageError) else None,
                "error_message": str(e),
                "traceback": _short_traceback(),
            }
        )
        _safe_publish(
            "operation.end",
            build_envelope(
                event="operation.end", component="storage", operation=operation, data=end_data
            ),
        )
        _logger.warning(
            f"{operation} status=failed duration_ms={duration_ms} "
            f"path={end_data.get('path')!r} error_type={type(e).__name__!r}"
        )
        raise
    else:
        duration_ms = int((time.perf_counter() - start) * 1000)
        end_data = dict(base)
        end_data.update(summary)
        end_data.update({"status": "succeeded", "duration_ms": duration_ms})
        _safe_publish(
            "operation.end",
            build_envelope(
                event="operation.end", component="storage", operation=operation, data=end_data
            ),
        )
        parts = [
            "status=succeeded",
            f"duration_ms={duration_ms}",
            f"path={end_data.get('path')!r}",
        ]
        for k in ("bytes", "created", "exists"):
            if k in end_data:
                parts.append(f"{k}={end_data[k]!r}")
        _logger.info(f"{operation} " + " ".join(parts))


def _address(
    base: BaseDirectory, segments: SegmentPath, name: str | None = None
) -> dict[str, Any]:
    """Diagnostics fields for a segment-addressed call, before resolution."""
    data: dict[str, Any] = {
        "base": str(base),
        "segments": [str(s) for s in segments],
    }
    if name is not None:
        data["name"] = str(name)
    return data


class FileManager:
    """CRUD operations over named subdirectories of well-known base directories."""

    def __init__(
        self,
        bases: BaseDirectoryService | dict[BaseDirectory, Path] | None = None,
    ) -> None:
        if bases is None:
            bases = BaseDirectoryService.from_resolver(ConfigResolver())
        elif isinstance(bases, dict):
            bases = BaseDirectoryService(bases)
        self._bases = bases
        self._lock = FifoLock()

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> FileManager:
        """Build a FileManager whose roots come from storage.roots.* keys."""
        return cls(BaseDirectoryService.from_resolver(resolver))

    @property
    def lock(self) -> FifoLock:
        return self._lock

    def root_dir(self, base: BaseDirectory) -> Path:
        """Return the absolute root of ``base``, creating it if necessary."""
        with self._lock:
            return self._bases.root_dir(base)

    def resolve(
        self, base: BaseDirectory, segments: SegmentPath, name: str | None = None
    ) -> Path:
        """Resolve a directory, or a file inside it when ``name`` is given."""
        with self._lock:
            return self._resolve(base, segments, name)

    def _resolve(
        self, base: BaseDirectory, segments: SegmentPath, name: str | None = None
    ) -> Path:
        if name is None:
            return resolve_directory(self._bases, base, segments)
        return resolve_file(self._bases, base, segments, name)

    @contextmanager
    def _observed(
        self,
        operation: str,
        base: BaseDirectory,
        segments: SegmentPath,
        name: str | None = None,
    ) -> Iterator[tuple[Path, dict[str, Any]]]:
        """Lock, observe and resolve a segment-addressed call."""
        with self._lock, _observe_operation(
            operation=operation, base=_address(base, segments, name)
        ) as summary:
            path = self._resolve(base, segments, name)
            summary["path"] = str(path)
            yield path, summary

    # EXISTS

    def exists(self, base: BaseDirectory, segments: SegmentPath, name: str | None = None) -> bool:
        with self._lock:
            return ops.path_exists(self._resolve(base, segments, name))

    def exists_at(self, path: PathLike) -> bool:
        path = Path(path)
        with self._lock:
            return ops.path_exists(path)

    # CREATE

    def create_directory(self, base: BaseDirectory, segments: SegmentPath) -> Path:
        """Create the directory for ``segments``; existing directories are fine.

        Returns:
            The resolved directory path.
        """
        with self._observed("storage.create_directory", base, segments) as (path, summary):
            return self._create_directory(path, summary)

    def create_directory_at(self, path: PathLike) -> Path:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.create_directory", base={"path": str(path)}
        ) as summary:
            return self._create_directory(path, summary)

    @staticmethod
    def _create_directory(path: Path, summary: dict[str, Any]) -> Path:
        summary["created"] = not ops.path_exists(path)
        return ops.create_directory_at(path)

    def create_file(
        self,
        base: BaseDirectory,
        segments: SegmentPath,
        name: str,
        contents: ops.Contents,
    ) -> Path:
        """Create file ``name`` holding ``contents``.

        Raises:
            PathAlreadyExistsError: if the file is already present
            FileCreationFailedError: if the write fails (e.g. missing parent)
            TypeError: if ``contents`` is not bytes-like; nothing is written
        """
        with self._observed("storage.create_file", base, segments, name) as (path, summary):
            return self._create_file(path, contents, summary)

    def create_file_at(self, path: PathLike, contents: ops.Contents) -> Path:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.create_file", base={"path": str(path)}
        ) as summary:
            return self._create_file(path, contents, summary)

    @staticmethod
    def _create_file(path: Path, contents: ops.Contents, summary: dict[str, Any]) -> Path:
        data = ops.as_bytes(contents)
        result = ops.create_file_at(path, data)
        summary["bytes"] = len(data)
        return result

    # READ

    def read_file(self, base: BaseDirectory, segments: SegmentPath, name: str) -> bytes:
        """Read the whole file.

        Raises:
            PathDoesNotExistError
            FileReadFailedError
        """
        with self._observed("storage.read_file", base, segments, name) as (path, summary):
            return self._read_file(path, summary)

    def read_file_at(self, path: PathLike) -> bytes:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.read_file", base={"path": str(path)}
        ) as summary:
            return self._read_file(path, summary)

    @staticmethod
    def _read_file(path: Path, summary: dict[str, Any]) -> bytes:
        data = ops.read_file_at(path)
        summary["bytes"] = len(data)
        return data

    # UPDATE

    def update_file(
        self,
        base: BaseDirectory,
        segments: SegmentPath,
        name: str,
        contents: ops.Contents,
    ) -> None:
        """Replace the whole content of an existing file."""
        with self._observed("storage.update_file", base, segments, name) as (path, summary):
            self._update_file(path, contents, summary)

    def update_file_at(self, path: PathLike, contents: ops.Contents) -> None:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.update_file", base={"path": str(path)}
        ) as summary:
            self._update_file(path, contents, summary)

    @staticmethod
    def _update_file(path: Path, contents: ops.Contents, summary: dict[str, Any]) -> None:
        data = ops.as_bytes(contents)
        ops.update_file_at(path, data)
        summary["bytes"] = len(data)

    # DELETE

    def delete_file(self, base: BaseDirectory, segments: SegmentPath, name: str) -> None:
        with self._observed("storage.delete_file", base, segments, name) as (path, _summary):
            ops.delete_file_at(path)

    def delete_file_at(self, path: PathLike) -> None:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.delete_file", base={"path": str(path)}
        ):
            ops.delete_file_at(path)

    def delete_directory(self, base: BaseDirectory, segments: SegmentPath) -> None:
        """Delete the directory for ``segments`` and everything in it."""
        with self._observed("storage.delete_directory", base, segments) as (path, _summary):
            ops.delete_directory_at(path)

    def delete_directory_at(self, path: PathLike) -> None:
        path = Path(path)
        with self._lock, _observe_operation(
            operation="storage.delete_directory", base={"path": str(path)}
        ):
            ops.delete_directory_at(path)
