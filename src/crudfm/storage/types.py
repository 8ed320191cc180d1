"""Types for the storage service.

ASCII-only.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum


class BaseDirectory(StrEnum):
    """Well-known root locations resolved by the base-directory service."""

    DOCUMENTS = "documents"
    CACHES = "caches"
    APPLICATION_SUPPORT = "application_support"
    DOWNLOADS = "downloads"
    TEMPORARY = "temporary"

    @property
    def config_key(self) -> str:
        return f"storage.roots.{self.value}_dir"


class Segment(StrEnum):
    """Base class for a closed set of directory names.

    Subclass it with one member per directory; the member value is the
    on-disk label:

        class Library(Segment):
            MUSIC = "Music"
            RAP = "Rap"
    """

    @property
    def label(self) -> str:
        return self.value


SegmentPath = Sequence[Segment]
