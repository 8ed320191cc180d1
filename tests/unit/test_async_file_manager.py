"""Tests for the asyncio facade."""

from __future__ import annotations

import asyncio

import pytest
from conftest import PARENT_CHILD_PAIRS, MediaFolder

from crudfm.core.errors import PathAlreadyExistsError, PathDoesNotExistError
from crudfm.storage import AsyncFileManager, BaseDirectory, FileManager

DOCS = BaseDirectory.DOCUMENTS


@pytest.fixture
def async_manager(manager: FileManager) -> AsyncFileManager:
    return AsyncFileManager(manager)


@pytest.mark.asyncio
async def test_async_crud_cycle(async_manager: AsyncFileManager) -> None:
    segments = [MediaFolder.MUSIC, MediaFolder.RAP]

    directory = await async_manager.create_directory(DOCS, segments)
    assert directory.is_dir()

    path = await async_manager.create_file(DOCS, segments, "Song.txt", b"\x01\x02\x03")
    assert await async_manager.read_file(DOCS, segments, "Song.txt") == b"\x01\x02\x03"
    assert await async_manager.read_file_at(path) == b"\x01\x02\x03"

    await async_manager.update_file(DOCS, segments, "Song.txt", b"\x09")
    assert await async_manager.read_file(DOCS, segments, "Song.txt") == b"\x09"

    await async_manager.delete_file(DOCS, segments, "Song.txt")
    with pytest.raises(PathDoesNotExistError):
        await async_manager.read_file(DOCS, segments, "Song.txt")

    await async_manager.delete_directory(DOCS, [MediaFolder.MUSIC])
    assert not await async_manager.exists(DOCS, [MediaFolder.MUSIC])


@pytest.mark.asyncio
async def test_async_path_forms(async_manager: AsyncFileManager) -> None:
    directory = await async_manager.resolve(DOCS, [MediaFolder.PICTURES])
    file_path = await async_manager.resolve(DOCS, [MediaFolder.PICTURES], "a.bin")

    assert await async_manager.create_directory_at(directory) == directory
    await async_manager.create_file_at(file_path, b"a")
    await async_manager.update_file_at(file_path, b"b")
    assert await async_manager.read_file_at(file_path) == b"b"

    await async_manager.delete_file_at(file_path)
    assert not await async_manager.exists_at(file_path)

    await async_manager.delete_directory_at(directory)
    assert not await async_manager.exists_at(directory)


@pytest.mark.asyncio
async def test_concurrent_tasks_all_complete(async_manager: AsyncFileManager) -> None:
    await asyncio.gather(
        *(async_manager.create_directory(DOCS, [p, c]) for p, c in PARENT_CHILD_PAIRS)
    )
    await asyncio.gather(
        *(
            async_manager.create_file(DOCS, [p, c], "f.txt", f"{p}/{c}".encode())
            for p, c in PARENT_CHILD_PAIRS
        )
    )

    for p, c in PARENT_CHILD_PAIRS:
        assert await async_manager.read_file(DOCS, [p, c], "f.txt") == f"{p}/{c}".encode()


@pytest.mark.asyncio
async def test_concurrent_create_same_file_has_one_winner(
    async_manager: AsyncFileManager,
) -> None:
    await async_manager.create_directory(DOCS, [MediaFolder.VIDEOS])

    results = await asyncio.gather(
        *(
            async_manager.create_file(DOCS, [MediaFolder.VIDEOS], "clip.bin", bytes([i]))
            for i in range(5)
        ),
        return_exceptions=True,
    )

    # Tasks start in submission order, so the first one wins.
    assert not isinstance(results[0], BaseException)
    assert all(isinstance(r, PathAlreadyExistsError) for r in results[1:])
    assert await async_manager.read_file(DOCS, [MediaFolder.VIDEOS], "clip.bin") == bytes([0])
