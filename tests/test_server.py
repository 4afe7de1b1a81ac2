from __future__ import annotations

import pytest

from mcp_diag_ingest_server.server import diag_server


def test_main_runs_stdio_transport(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(diag_server.mcp, "run", lambda **kwargs: calls.append(kwargs))

    diag_server.main()

    assert calls == [{"transport": "stdio"}]


def test_configure_logging_reads_env_level(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict = {}
    monkeypatch.setenv("DIAG_INGEST_LOG_LEVEL", "debug")
    monkeypatch.setattr(diag_server.logging, "basicConfig", lambda **kwargs: seen.update(kwargs))

    diag_server.configure_logging()

    assert seen["level"] == diag_server.logging.DEBUG
