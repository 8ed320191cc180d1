from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from conftest import MediaFolder

import crudfm.core.diagnostics as diagnostics
from crudfm.core.config import ConfigResolver
from crudfm.core.diagnostics import build_envelope, install_jsonl_sink, is_diagnostics_enabled
from crudfm.core.events import get_event_bus
from crudfm.storage import BaseDirectory, FileManager


@pytest.fixture(autouse=True)
def _reset_sink():
    diagnostics._SINK_INSTALLED = False  # type: ignore[attr-defined]
    yield
    diagnostics._SINK_INSTALLED = False  # type: ignore[attr-defined]


def _resolver(tmp_path: Path, **cli: Any) -> ConfigResolver:
    return ConfigResolver(
        cli_args=cli,
        user_config_path=tmp_path / "user_config.yaml",
        system_config_path=tmp_path / "system_config.yaml",
    )


def test_build_envelope_shape() -> None:
    env = build_envelope(event="e", component="storage", operation="op", data={"a": 1})

    assert set(env) == {"event", "component", "operation", "timestamp", "data"}
    assert env["timestamp"].endswith("Z")
    assert diagnostics.is_envelope(env)
    assert not diagnostics.is_envelope({"event": "e"})


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (False, False), ("yes", True), ("off", False), (1, True), ("garbage", False)],
)
def test_is_diagnostics_enabled(tmp_path: Path, value: Any, expected: bool) -> None:
    resolver = _resolver(tmp_path, diagnostics={"enabled": value})
    assert is_diagnostics_enabled(resolver) is expected


def test_disabled_does_not_create_jsonl(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, diagnostics={"dir": str(tmp_path / "diag")})
    install_jsonl_sink(resolver=resolver)

    get_event_bus().publish("evt", {"k": "v"})

    assert not (tmp_path / "diag" / "diagnostics.jsonl").exists()


def test_enabled_sink_records_storage_operations(tmp_path: Path) -> None:
    resolver = _resolver(
        tmp_path, diagnostics={"enabled": True, "dir": str(tmp_path / "diag")}
    )
    install_jsonl_sink(resolver=resolver)
    install_jsonl_sink(resolver=resolver)  # idempotent

    manager = FileManager({BaseDirectory.DOCUMENTS: tmp_path / "docs"})
    manager.create_directory(BaseDirectory.DOCUMENTS, [MediaFolder.MUSIC])
    get_event_bus().publish("plain", {"b": 2})

    lines = (tmp_path / "diag" / "diagnostics.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]

    assert [r["event"] for r in records] == ["operation.start", "operation.end", "plain"]
    assert records[1]["operation"] == "storage.create_directory"
    assert records[1]["data"]["status"] == "succeeded"
    # Non-envelope payloads are wrapped.
    assert records[2]["component"] == "unknown"
    assert records[2]["data"] == {"b": 2}
