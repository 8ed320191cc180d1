"""Asyncio facade over FileManager.

Callers queue on an ``asyncio.Lock`` (FIFO) and each filesystem call runs in
a worker thread, so the event loop is never blocked. The wrapped
FileManager keeps its own lock, so sync and async callers sharing one
manager are serialized together.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import ParamSpec, TypeVar

from .manager import FileManager, PathLike
from .ops import Contents
from .types import BaseDirectory, SegmentPath

T = TypeVar("T")
P = ParamSpec("P")


class AsyncFileManager:
    """Coroutine versions of the FileManager operations."""

    def __init__(self, manager: FileManager | None = None) -> None:
        self._manager = manager or FileManager()
        self._queue = asyncio.Lock()

    @property
    def manager(self) -> FileManager:
        return self._manager

    async def _call(self, fn: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
        async with self._queue:
            return await asyncio.to_thread(fn, *args, **kwargs)

    async def resolve(
        self, base: BaseDirectory, segments: SegmentPath, name: str | None = None
    ) -> Path:
        return await self._call(self._manager.resolve, base, segments, name)

    async def exists(
        self, base: BaseDirectory, segments: SegmentPath, name: str | None = None
    ) -> bool:
        return await self._call(self._manager.exists, base, segments, name)

    async def exists_at(self, path: PathLike) -> bool:
        return await self._call(self._manager.exists_at, path)

    async def create_directory(self, base: BaseDirectory, segments: SegmentPath) -> Path:
        return await self._call(self._manager.create_directory, base, segments)

    async def create_directory_at(self, path: PathLike) -> Path:
        return await self._call(self._manager.create_directory_at, path)

    async def create_file(
        self, base: BaseDirectory, segments: SegmentPath, name: str, contents: Contents
    ) -> Path:
        return await self._call(self._manager.create_file, base, segments, name, contents)

    async def create_file_at(self, path: PathLike, contents: Contents) -> Path:
        return await self._call(self._manager.create_file_at, path, contents)

    async def read_file(self, base: BaseDirectory, segments: SegmentPath, name: str) -> bytes:
        return await self._call(self._manager.read_file, base, segments, name)

    async def read_file_at(self, path: PathLike) -> bytes:
        return await self._call(self._manager.read_file_at, path)

    async def update_file(
        self, base: BaseDirectory, segments: SegmentPath, name: str, contents: Contents
    ) -> None:
        await self._call(self._manager.update_file, base, segments, name, contents)

    async def update_file_at(self, path: PathLike, contents: Contents) -> None:
        await self._call(self._manager.update_file_at, path, contents)

    async def delete_file(self, base: BaseDirectory, segments: SegmentPath, name: str) -> None:
        await self._call(self._manager.delete_file, base, segments, name)

    async def delete_file_at(self, path: PathLike) -> None:
        await self._call(self._manager.delete_file_at, path)

    async def delete_directory(self, base: BaseDirectory, segments: SegmentPath) -> None:
        await self._call(self._manager.delete_directory, base, segments)

    async def delete_directory_at(self, path: PathLike) -> None:
        await self._call(self._manager.delete_directory_at, path)
