"""Log record fan-out.

Every record a CrudFMLogger emits is published here, whether or not it is
echoed to the console. Tests capture log output by subscribing.
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass

LogCallback = Callable[["LogRecord"], None]


@dataclass(frozen=True)
class LogRecord:
    level_name: str
    plain: str
    logger_name: str


class LogBus:
    def __init__(self) -> None:
        self._by_level: dict[str, list[LogCallback]] = {}
        self._all: list[LogCallback] = []

    def subscribe(self, level_name: str, cb: LogCallback) -> None:
        self._by_level.setdefault(level_name.upper(), []).append(cb)

    def subscribe_all(self, cb: LogCallback) -> None:
        self._all.append(cb)

    def publish(self, record: LogRecord) -> None:
        for cb in [*self._all, *self._by_level.get(record.level_name, [])]:
            try:
                cb(record)
            except Exception:
                # Reporting through the logger would recurse.
                with contextlib.suppress(Exception):
                    sys.stderr.write("LogBus subscriber failed.\n" + traceback.format_exc())

    def clear(self) -> None:
        self._by_level.clear()
        self._all.clear()


_LOG_BUS: LogBus | None = None


def get_log_bus() -> LogBus:
    global _LOG_BUS
    if _LOG_BUS is None:
        _LOG_BUS = LogBus()
    return _LOG_BUS
