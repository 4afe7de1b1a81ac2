from __future__ import annotations

from pathlib import Path

import pytest

from mcp_diag_ingest_server.core.detector import detect_file_type
from mcp_diag_ingest_server.core.formats import parse_iostat, parse_ttop
from mcp_diag_ingest_server.core.models import DetectedType
from mcp_diag_ingest_server.resources.registry import (
    SAMPLE_IOSTAT,
    SAMPLE_TTOP,
    _resolve_text_capture,
)


def test_sample_captures_are_valid() -> None:
    assert detect_file_type("sample.txt", SAMPLE_TTOP.encode()) == DetectedType.TTOP
    assert detect_file_type("sample.txt", SAMPLE_IOSTAT.encode()) == DetectedType.IOSTAT
    assert len(parse_ttop(SAMPLE_TTOP).snapshots) == 1
    assert len(parse_iostat(SAMPLE_IOSTAT).snapshots) == 1


def test_resolve_text_capture(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DIAG_INGEST_BASE_DIR", str(tmp_path))
    (tmp_path / "ttop.txt").write_text(SAMPLE_TTOP, encoding="utf-8")
    (tmp_path / "bundle.zip").write_bytes(b"PK\x03\x04")

    assert _resolve_text_capture("ttop.txt") == (tmp_path / "ttop.txt").resolve()
    with pytest.raises(ValueError, match="Refusing"):
        _resolve_text_capture("bundle.zip")
    with pytest.raises(FileNotFoundError):
        _resolve_text_capture("missing.txt")
    with pytest.raises(ValueError, match="escapes base dir"):
        _resolve_text_capture("../elsewhere.txt")
