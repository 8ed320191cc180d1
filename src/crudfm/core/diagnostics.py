"""Diagnostics envelope and JSONL sink.

Every storage operation publishes ``operation.start`` / ``operation.end``
envelopes on the event bus. The JSONL sink persists them when
``diagnostics.enabled`` resolves truthy; it is registered once per process and
self-filters when disabled.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from crudfm.core.config import ConfigResolver
from crudfm.core.errors import ConfigError
from crudfm.core.events import get_event_bus
from crudfm.core.logging import get_logger

_logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

ENVELOPE_KEYS = frozenset({"event", "component", "operation", "timestamp", "data"})


def build_envelope(
    *,
    event: str,
    component: str,
    operation: str,
    data: dict[str, Any],
) -> dict[str, Any]:
    """Build the diagnostics envelope.

    Schema:
        {
          "event": "<string>",
          "component": "<string>",
          "operation": "<string>",
          "timestamp": "<iso8601 utc>",
          "data": { ... }
        }

    Timestamp is emitted in UTC with a trailing 'Z'.
    """
    ts = datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "event": event,
        "component": component,
        "operation": operation,
        "timestamp": ts,
        "data": data,
    }


def is_envelope(obj: Any) -> bool:
    if not isinstance(obj, dict) or set(obj.keys()) != ENVELOPE_KEYS:
        return False
    if not all(isinstance(obj[k], str) for k in ("event", "component", "operation", "timestamp")):
        return False
    return isinstance(obj["data"], dict)


def is_diagnostics_enabled(resolver: ConfigResolver) -> bool:
    """Return whether diagnostics are enabled (key: diagnostics.enabled).

    Environment values arrive as strings and are normalized here.
    """
    try:
        value, src = resolver.resolve("diagnostics.enabled")
    except ConfigError:
        return False

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)

    s = str(value).strip().lower()
    if s in _TRUE_VALUES:
        return True
    if s not in _FALSE_VALUES and src == "env":
        _logger.warning(
            f"Invalid CRUDFM_DIAGNOSTICS_ENABLED value; treating as disabled. value={value!r}"
        )
    return False


_SINK_INSTALLED = False


def install_jsonl_sink(*, resolver: ConfigResolver) -> None:
    """Install the JSONL diagnostics sink subscriber.

    Idempotent. Sink path: <diagnostics.dir>/diagnostics.jsonl
    """
    global _SINK_INSTALLED
    if _SINK_INSTALLED:
        return

    def _on_any_event(event: str, data: dict[str, Any]) -> None:
        if not is_diagnostics_enabled(resolver):
            return

        try:
            out_dir, _src = resolver.resolve("diagnostics.dir")
        except ConfigError:
            _logger.warning("Missing diagnostics.dir; cannot write diagnostics JSONL.")
            return
        out_path = Path(str(out_dir)).expanduser() / "diagnostics.jsonl"

        if is_envelope(data):
            payload = data
        else:
            payload = build_envelope(
                event=event, component="unknown", operation="unknown", data=data
            )

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(payload, ensure_ascii=True, separators=(",", ":"), sort_keys=True)
            with out_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception as e:
            _logger.warning(f"Diagnostics sink write failed: {type(e).__name__}: {e}")

    get_event_bus().subscribe_all(_on_any_event)
    _SINK_INSTALLED = True
