"""Pytest configuration and fixtures."""

import sys
import uuid
from pathlib import Path

import pytest

# Add src to path (for 'crudfm.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from crudfm.core.events import get_event_bus  # noqa: E402
from crudfm.core.log_bus import get_log_bus  # noqa: E402
from crudfm.core.logging import (  # noqa: E402
    VerbosityLevel,
    set_colors,
    set_echo,
    set_verbosity,
)
from crudfm.storage import BaseDirectory, FileManager, Segment  # noqa: E402


class MediaFolder(Segment):
    # MUSIC
    MUSIC = "Music"
    EDM = "EDM"
    ENGLISH = "English"
    RAP = "Rap"

    # PICTURES
    PICTURES = "Pictures"
    MIX_PICTURES = "Mix Pictures"
    MY_PICTURES = "My Pictures"

    # VIDEOS
    VIDEOS = "Videos"
    MY_VIDEOS = "My Videos"
    MUSIC_VIDEOS = "Music Videos"


# First entry is the parent directory, the rest are its subdirectories.
DIRECTORY_SETS: list[list[MediaFolder]] = [
    [MediaFolder.MUSIC, MediaFolder.EDM, MediaFolder.ENGLISH, MediaFolder.RAP],
    [MediaFolder.PICTURES, MediaFolder.MIX_PICTURES, MediaFolder.MY_PICTURES],
    [MediaFolder.VIDEOS, MediaFolder.MY_VIDEOS, MediaFolder.MUSIC_VIDEOS],
]

PARENT_CHILD_PAIRS: list[tuple[MediaFolder, MediaFolder]] = [
    (folders[0], child) for folders in DIRECTORY_SETS for child in folders[1:]
]


@pytest.fixture(autouse=True)
def _isolate_bus_and_logging():
    """Keep subscribers, verbosity and colors from leaking between tests."""
    get_event_bus().clear()
    get_log_bus().clear()
    set_echo(False)
    set_colors(True)
    set_verbosity(VerbosityLevel.NORMAL)
    yield
    get_event_bus().clear()
    get_log_bus().clear()
    set_echo(True)
    set_colors(True)


@pytest.fixture
def roots(tmp_path: Path) -> dict[BaseDirectory, Path]:
    """Per-test base directories. Nothing is created up front."""
    return {base: tmp_path / "roots" / base.value for base in BaseDirectory}


@pytest.fixture
def manager(roots: dict[BaseDirectory, Path]) -> FileManager:
    return FileManager(roots)


@pytest.fixture
def documents(roots: dict[BaseDirectory, Path]) -> Path:
    """Expected absolute root for BaseDirectory.DOCUMENTS."""
    return roots[BaseDirectory.DOCUMENTS].absolute()


@pytest.fixture
def mock_data() -> bytes:
    return str(uuid.uuid4()).encode("utf-8")
