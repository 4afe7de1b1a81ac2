"""Core data models for diagnostic capture ingestion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DetectedType(str, Enum):
    """File type tags produced by the detector."""

    JFR = "jfr"
    TTOP = "ttop"
    IOSTAT = "iostat"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ThreadInfo:
    """One process/thread row from a ttop snapshot."""

    pid: int
    user: str
    cpu: float  # %CPU
    mem: float  # %MEM
    command: str


@dataclass(frozen=True, slots=True)
class ThreadCounts:
    """Counts from the "Threads:" summary line."""

    total: int = 0
    running: int = 0
    sleeping: int = 0
    stopped: int = 0
    zombie: int = 0


@dataclass(frozen=True, slots=True)
class SystemMemory:
    """Memory and swap figures (MiB) from the "MiB Mem" / "MiB Swap" lines."""

    mem_total: float = 0.0
    mem_free: float = 0.0
    mem_used: float = 0.0
    mem_buff_cache: float = 0.0
    swap_total: float = 0.0
    swap_free: float = 0.0
    swap_used: float = 0.0
    mem_avail: float = 0.0


@dataclass(frozen=True, slots=True)
class TTopSnapshot:
    """A single point in time of a ttop capture."""

    timestamp: datetime  # ttop has no date; today's date is used
    thread_counts: ThreadCounts | None = None
    system_memory: SystemMemory | None = None
    threads: tuple[ThreadInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class TTopReportData:
    snapshots: tuple[TTopSnapshot, ...] = ()


@dataclass(frozen=True, slots=True)
class CPUStats:
    """avg-cpu percentages for one iostat sample."""

    user: float
    nice: float
    system: float
    iowait: float
    steal: float
    idle: float


@dataclass(frozen=True, slots=True)
class DeviceStats:
    """Extended statistics for one block device (iostat -x column order)."""

    device: str
    reads_per_s: float = 0.0  # r/s
    read_kb_per_s: float = 0.0  # rkB/s
    read_req_merged_per_s: float = 0.0  # rrqm/s
    read_req_merged_pct: float = 0.0  # %rrqm
    read_await: float = 0.0  # r_await
    read_req_size: float = 0.0  # rareq-sz
    writes_per_s: float = 0.0  # w/s
    write_kb_per_s: float = 0.0  # wkB/s
    write_req_merged_per_s: float = 0.0  # wrqm/s
    write_req_merged_pct: float = 0.0  # %wrqm
    write_await: float = 0.0  # w_await
    write_req_size: float = 0.0  # wareq-sz
    discards_per_s: float = 0.0  # d/s
    discard_kb_per_s: float = 0.0  # dkB/s
    discard_req_merged_per_s: float = 0.0  # drqm/s
    discard_req_merged_pct: float = 0.0  # %drqm
    discard_await: float = 0.0  # d_await
    discard_req_size: float = 0.0  # dareq-sz
    flushes_per_s: float = 0.0  # f/s
    flush_await: float = 0.0  # f_await
    avg_queue_size: float = 0.0  # aqu-sz
    utilization: float = 0.0  # %util


# Numeric DeviceStats fields in source column order.
DEVICE_STAT_FIELDS: tuple[str, ...] = (
    "reads_per_s",
    "read_kb_per_s",
    "read_req_merged_per_s",
    "read_req_merged_pct",
    "read_await",
    "read_req_size",
    "writes_per_s",
    "write_kb_per_s",
    "write_req_merged_per_s",
    "write_req_merged_pct",
    "write_await",
    "write_req_size",
    "discards_per_s",
    "discard_kb_per_s",
    "discard_req_merged_per_s",
    "discard_req_merged_pct",
    "discard_await",
    "discard_req_size",
    "flushes_per_s",
    "flush_await",
    "avg_queue_size",
    "utilization",
)


@dataclass(frozen=True, slots=True)
class IOStatSnapshot:
    """A single point in time of an iostat capture."""

    timestamp: datetime
    cpu_stats: CPUStats
    devices: tuple[DeviceStats, ...] = ()


@dataclass(frozen=True, slots=True)
class IOStatReportData:
    system_info: str = ""  # first "Linux ..." header line, verbatim
    snapshots: tuple[IOStatSnapshot, ...] = ()
