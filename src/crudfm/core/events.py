"""Event bus carrying storage diagnostics envelopes.

The JSONL sink and host applications follow storage operations through it.
Subscriber failures are logged and never reach the publishing operation.
"""

from __future__ import annotations

import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from crudfm.core.logging import get_logger

_logger = get_logger(__name__)

EventCallback = Callable[[dict[str, Any]], None]
AnyEventCallback = Callable[[str, dict[str, Any]], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventCallback]] = defaultdict(list)
        self._all_subscribers: list[AnyEventCallback] = []

    def subscribe(self, event: str, callback: EventCallback) -> None:
        """Receive the payload of every ``event`` publication."""
        self._subscribers[event].append(callback)

    def subscribe_all(self, callback: AnyEventCallback) -> None:
        """Receive ``(event, payload)`` for every publication."""
        self._all_subscribers.append(callback)

    def publish(self, event: str, data: dict[str, Any] | None = None) -> None:
        data = data or {}
        for cb in list(self._subscribers.get(event, [])):
            self._deliver(event, cb, data)
        for cb_all in list(self._all_subscribers):
            self._deliver(event, cb_all, event, data)

    @staticmethod
    def _deliver(event: str, callback: Callable[..., None], *args: Any) -> None:
        try:
            callback(*args)
        except Exception as e:
            _logger.error(
                f"Event subscriber failed (event={event!r}, callback={callback!r}): "
                f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
            )

    def clear(self) -> None:
        self._subscribers.clear()
        self._all_subscribers.clear()


_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus
