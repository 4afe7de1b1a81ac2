"""Summary statistics over parsed captures."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .models import IOStatReportData, TTopReportData


class TTopSummary(BaseModel):
    snapshot_count: int = Field(ge=0, description="Number of top snapshots in the capture.")
    unique_threads: int = Field(ge=0, description="Distinct PIDs seen across all snapshots.")
    peak_threads: int = Field(ge=0, description="Largest number of thread rows in one snapshot.")
    summary: str
    analysis: str


class IOStatSummary(BaseModel):
    snapshot_count: int = Field(ge=0, description="Number of iostat samples in the capture.")
    unique_devices: int = Field(ge=0, description="Distinct device names seen.")
    peak_cpu_usage: float = Field(description="Highest (100 - %idle) across samples.")
    peak_device_queue_size: float = Field(description="Highest aqu-sz of any device.")
    system_info: str = Field(default="", description="The capture's Linux header line.")
    summary: str
    analysis: str


def count_unique_threads(data: TTopReportData) -> int:
    return len({t.pid for s in data.snapshots for t in s.threads})


def peak_thread_count(data: TTopReportData) -> int:
    return max((len(s.threads) for s in data.snapshots), default=0)


def count_unique_devices(data: IOStatReportData) -> int:
    return len({d.device for s in data.snapshots for d in s.devices})


def peak_cpu_usage(data: IOStatReportData) -> float:
    return max((100.0 - s.cpu_stats.idle for s in data.snapshots), default=0.0)


def peak_device_queue_size(data: IOStatReportData) -> float:
    return max((d.avg_queue_size for s in data.snapshots for d in s.devices), default=0.0)


def summarize_ttop(data: TTopReportData) -> TTopSummary:
    """Compute headline statistics for a ttop capture."""
    snapshot_count = len(data.snapshots)
    unique = count_unique_threads(data)
    peak = peak_thread_count(data)
    return TTopSummary(
        snapshot_count=snapshot_count,
        unique_threads=unique,
        peak_threads=peak,
        summary=(
            f"TTop analysis report covering {snapshot_count} snapshots "
            f"with {unique} unique threads observed"
        ),
        analysis=(
            f"Peak thread count: {peak}. Covers thread count over time, CPU usage of the "
            "busiest threads and memory usage by user."
        ),
    )


def summarize_iostat(data: IOStatReportData) -> IOStatSummary:
    """Compute headline statistics for an iostat capture."""
    snapshot_count = len(data.snapshots)
    devices = count_unique_devices(data)
    cpu_peak = peak_cpu_usage(data)
    queue_peak = peak_device_queue_size(data)
    return IOStatSummary(
        snapshot_count=snapshot_count,
        unique_devices=devices,
        peak_cpu_usage=cpu_peak,
        peak_device_queue_size=queue_peak,
        system_info=data.system_info,
        summary=(
            f"IOStat analysis report covering {snapshot_count} snapshots "
            f"with {devices} devices monitored"
        ),
        analysis=(
            f"Peak CPU usage: {cpu_peak:.1f}%, Peak device queue size: {queue_peak:.1f}. "
            "Covers CPU utilization, I/O throughput, await times, queue sizes and request patterns."
        ),
    )
