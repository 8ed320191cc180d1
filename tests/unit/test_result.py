"""Tests for Outcome / attempt."""

from __future__ import annotations

import pytest
from conftest import MediaFolder

from crudfm.core.errors import ErrorKind, PathDoesNotExistError
from crudfm.storage import AsyncFileManager, BaseDirectory, FileManager, attempt, attempt_async

DOCS = BaseDirectory.DOCUMENTS


def test_attempt_success(manager: FileManager) -> None:
    outcome = attempt(manager.create_directory, DOCS, [MediaFolder.MUSIC])

    assert outcome.ok
    assert outcome.kind is None
    assert outcome.unwrap().is_dir()


def test_attempt_failure_carries_kind_and_path(manager: FileManager) -> None:
    expected = manager.resolve(DOCS, [MediaFolder.MUSIC], "missing.txt")

    outcome = attempt(manager.read_file, DOCS, [MediaFolder.MUSIC], "missing.txt")

    assert not outcome.ok
    assert outcome.value is None
    assert outcome.kind is ErrorKind.PATH_DOES_NOT_EXIST
    assert outcome.error is not None
    assert outcome.error.path == str(expected)
    with pytest.raises(PathDoesNotExistError):
        outcome.unwrap()


def test_attempt_lets_non_storage_errors_through() -> None:
    def broken() -> None:
        raise ValueError("not a storage error")

    with pytest.raises(ValueError):
        attempt(broken)


@pytest.mark.asyncio
async def test_attempt_async(manager: FileManager) -> None:
    async_manager = AsyncFileManager(manager)

    missing = await attempt_async(async_manager.delete_directory(DOCS, [MediaFolder.VIDEOS]))
    assert missing.kind is ErrorKind.PATH_DOES_NOT_EXIST

    created = await attempt_async(async_manager.create_directory(DOCS, [MediaFolder.VIDEOS]))
    assert created.ok
