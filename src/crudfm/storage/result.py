"""Discriminated results for callers that prefer values over exceptions.

    outcome = attempt(manager.read_file, BaseDirectory.DOCUMENTS, [Library.MUSIC], "a.txt")
    if outcome.kind is ErrorKind.PATH_DOES_NOT_EXIST:
        ...
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, ParamSpec, TypeVar

from crudfm.core.errors import ErrorKind, StorageError

T = TypeVar("T")
P = ParamSpec("P")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the StorageError that prevented it."""

    value: T | None = None
    error: StorageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> T:
        """Return the value, re-raising the stored error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(fn: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> Outcome[T]:
    """Call ``fn`` and capture a StorageError as a failed Outcome.

    Errors outside the storage taxonomy (e.g. OSError from an update write)
    still propagate.
    """
    try:
        return Outcome(value=fn(*args, **kwargs))
    except StorageError as e:
        return Outcome(error=e)


async def attempt_async(awaitable: Awaitable[T]) -> Outcome[T]:
    """Await ``awaitable`` and capture a StorageError as a failed Outcome."""
    try:
        return Outcome(value=await awaitable)
    except StorageError as e:
        return Outcome(error=e)
