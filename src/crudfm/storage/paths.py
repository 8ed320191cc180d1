"""Base-directory resolution and segment joining.

A location is always ``<root of base>/<segment labels...>[/<file name>]``.
Labels are single path components, so a resolved location never escapes
the root of its base directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from crudfm.core.config import ConfigResolver
from crudfm.core.errors import ConfigError, InvalidSegmentError, PathResolutionFailedError
from crudfm.core.logging import get_logger

from .types import BaseDirectory, Segment, SegmentPath

_logger = get_logger(__name__)

_FORBIDDEN_LABELS = {".", ".."}


@dataclass(frozen=True)
class RootConfig:
    """Configured (not yet created) root directory on disk."""

    name: BaseDirectory
    dir_path: Path


def validate_label(label: Any) -> str:
    """Return ``label`` if it is a single, non-empty path component.

    Raises:
        InvalidSegmentError
    """
    if not isinstance(label, str):
        raise InvalidSegmentError(repr(label), "expected a string label")
    if label == "":
        raise InvalidSegmentError(label, "label is empty")
    if label in _FORBIDDEN_LABELS:
        raise InvalidSegmentError(label, "relative path markers are not allowed")
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    if any(sep in label for sep in separators):
        raise InvalidSegmentError(label, "label contains a path separator")
    if "\x00" in label:
        raise InvalidSegmentError(label, "label contains a NUL byte")
    return label


def segment_labels(segments: SegmentPath) -> list[str]:
    labels: list[str] = []
    for seg in segments:
        if not isinstance(seg, Segment):
            raise InvalidSegmentError(repr(seg), "segments must be Segment enum members")
        labels.append(validate_label(seg.label))
    return labels


class BaseDirectoryService:
    """Resolve well-known base directories to absolute roots.

    Roots are created on first access.
    """

    def __init__(self, roots: dict[BaseDirectory, Path]) -> None:
        self._roots = {
            BaseDirectory(k): RootConfig(name=BaseDirectory(k), dir_path=Path(v).expanduser())
            for k, v in roots.items()
        }

    @classmethod
    def from_resolver(cls, resolver: ConfigResolver) -> BaseDirectoryService:
        """Build the service from ConfigResolver.

        Configuration keys: storage.roots.<base>_dir, e.g.
        storage.roots.documents_dir. Bases without a key are left
        unconfigured and fail on resolution.
        """
        roots: dict[BaseDirectory, Path] = {}
        for base in BaseDirectory:
            try:
                value, _src = resolver.resolve(base.config_key)
            except ConfigError:
                continue
            if isinstance(value, str) and value:
                roots[base] = Path(value)
        return cls(roots)

    def configured(self) -> list[BaseDirectory]:
        return sorted(self._roots)

    def root_dir(self, base: BaseDirectory) -> Path:
        """Return the absolute root for ``base``, creating it if missing.

        Raises:
            PathResolutionFailedError
        """
        try:
            root = self._roots[BaseDirectory(base)]
        except (KeyError, ValueError):
            raise PathResolutionFailedError(str(base), "base directory is not configured") from None

        abs_root = root.dir_path.absolute()
        try:
            abs_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _logger.warning(
                f"storage.root status=failed base={root.name.value!r} path={str(abs_root)!r} "
                f"error_type={type(e).__name__!r}"
            )
            raise PathResolutionFailedError(str(abs_root), type(e).__name__) from e
        return abs_root


def resolve_directory(
    service: BaseDirectoryService,
    base: BaseDirectory,
    segments: SegmentPath,
    *,
    allow_empty: bool = False,
) -> Path:
    """Join the root of ``base`` with segment labels, in order.

    Pure apart from the root creation done by the base-directory service.

    Raises:
        InvalidSegmentError
        PathResolutionFailedError
    """
    labels = segment_labels(segments)
    if not labels and not allow_empty:
        raise InvalidSegmentError("", "at least one segment is required")

    root = service.root_dir(base)
    path = root.joinpath(*labels)
    _logger.debug(f"storage.resolve base={str(base)!r} segments={labels!r} path={str(path)!r}")
    return path


def resolve_file(
    service: BaseDirectoryService,
    base: BaseDirectory,
    segments: SegmentPath,
    name: str,
) -> Path:
    """Resolve a file ``name`` inside the directory given by ``segments``.

    An empty segment list places the file directly under the root.
    """
    leaf = validate_label(name)
    return resolve_directory(service, base, segments, allow_empty=True) / leaf
