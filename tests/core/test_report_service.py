from __future__ import annotations

import os
from pathlib import Path

import pytest

from mcp_diag_ingest_server.core.formats import StructuralError
from mcp_diag_ingest_server.core.models import DetectedType, IOStatReportData, TTopReportData
from mcp_diag_ingest_server.core.report_service import (
    DEFAULT_MAX_BYTES,
    coerce_file_type,
    detect_capture,
    generate_report,
    parse_capture,
    read_capture,
    resolve_max_bytes,
)


@pytest.mark.asyncio
async def test_generate_ttop_report(tmp_path: Path, ttop_text: str) -> None:
    path = tmp_path / "capture.txt"
    path.write_text(ttop_text, encoding="utf-8")

    report = await generate_report(path)

    assert report["type"] == "ttop"
    assert report["file_name"] == "capture.txt"
    assert report["file_size"] == len(ttop_text.encode())
    assert report["snapshot_count"] == 2
    assert report["unique_threads"] == 3
    assert report["peak_threads"] == 2
    assert "generated_at" in report


@pytest.mark.asyncio
async def test_generate_iostat_report(tmp_path: Path, iostat_text: str) -> None:
    path = tmp_path / "iostat.txt"
    path.write_text(iostat_text, encoding="utf-8")

    report = await generate_report(path)

    assert report["type"] == "iostat"
    assert report["unique_devices"] == 1
    assert report["peak_device_queue_size"] == 3.42
    assert "Linux" in report["system_info"]


@pytest.mark.asyncio
async def test_generate_report_for_jfr_has_no_statistics(tmp_path: Path) -> None:
    path = tmp_path / "profile.jfr"
    path.write_bytes(b"FLR\x00\x02\x00")

    report = await generate_report(path)

    assert report["type"] == "jfr"
    assert report["file_size"] == 6
    assert "snapshot_count" not in report
    assert "JFR" in report["summary"]


@pytest.mark.asyncio
async def test_generate_report_surfaces_iostat_structure_errors(tmp_path: Path) -> None:
    path = tmp_path / "iostat.log"
    path.write_text("09/04/24 12:07:20\n09/04/24 12:07:21\n", encoding="utf-8")

    with pytest.raises(StructuralError, match="line 2"):
        await generate_report(path)


@pytest.mark.asyncio
async def test_forced_type_skips_detection(tmp_path: Path, ttop_text: str) -> None:
    path = tmp_path / "renamed.bin"
    path.write_text(ttop_text.replace("PID", "pid"), encoding="utf-8")

    assert await detect_capture(path) == DetectedType.UNKNOWN
    detected, data = await parse_capture(path, file_type="TTOP")
    assert detected == DetectedType.TTOP
    assert isinstance(data, TTopReportData)
    assert len(data.snapshots) == 2


@pytest.mark.asyncio
async def test_parse_capture_iostat(tmp_path: Path, iostat_text: str) -> None:
    path = tmp_path / "disk-stats.txt"
    path.write_text(iostat_text, encoding="utf-8")

    detected, data = await parse_capture(path)
    assert detected == DetectedType.IOSTAT
    assert isinstance(data, IOStatReportData)
    assert len(data.snapshots) == 2


@pytest.mark.asyncio
async def test_parse_capture_rejects_unparseable_types(tmp_path: Path) -> None:
    path = tmp_path / "notes.md"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(ValueError, match="cannot be parsed"):
        await parse_capture(path)


@pytest.mark.asyncio
async def test_read_capture_limits(tmp_path: Path) -> None:
    path = tmp_path / "big.txt"
    path.write_bytes(b"x" * 100)

    assert await read_capture(path, max_bytes=100) == b"x" * 100
    with pytest.raises(ValueError, match="limit is 10 bytes"):
        await read_capture(path, max_bytes=10)
    with pytest.raises(FileNotFoundError):
        await read_capture(tmp_path / "missing.txt")


@pytest.mark.asyncio
async def test_read_capture_bounds_the_read_itself(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "growing.txt"
    path.write_bytes(b"x" * 100)

    real_stat = Path.stat

    def stale_stat(self: Path, *args, **kwargs) -> os.stat_result:
        # Report the size the file had before it grew.
        st = real_stat(self, *args, **kwargs)
        fields = list(st[:10])
        fields[6] = 5
        return os.stat_result(fields)

    monkeypatch.setattr(Path, "stat", stale_stat)

    with pytest.raises(ValueError, match="grew while reading; limit is 10 bytes"):
        await read_capture(path, max_bytes=10)


def test_resolve_max_bytes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DIAG_INGEST_MAX_BYTES", raising=False)
    assert resolve_max_bytes(None) == DEFAULT_MAX_BYTES
    assert resolve_max_bytes(5) == 5

    monkeypatch.setenv("DIAG_INGEST_MAX_BYTES", "2048")
    assert resolve_max_bytes(None) == 2048

    monkeypatch.setenv("DIAG_INGEST_MAX_BYTES", "lots")
    with pytest.raises(ValueError, match="must be an integer"):
        resolve_max_bytes(None)

    with pytest.raises(ValueError, match=">= 1"):
        resolve_max_bytes(0)


def test_coerce_file_type() -> None:
    assert coerce_file_type(None) is None
    assert coerce_file_type(" IOStat ") == DetectedType.IOSTAT
    assert coerce_file_type(DetectedType.JFR) == DetectedType.JFR
    with pytest.raises(ValueError, match="Unknown file type 'csv'"):
        coerce_file_type("csv")
