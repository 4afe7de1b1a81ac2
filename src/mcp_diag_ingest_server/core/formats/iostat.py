"""I/O statistics (iostat -x) capture parser.

Expected layout, repeated once per sample::

    Linux 5.10.0-32-cloud-amd64 (host)   09/04/24   _x86_64_  (4 CPU)

    09/04/24 12:07:20
    avg-cpu:  %user   %nice %system %iowait  %steal   %idle
               2.36    0.00    0.40    0.04    0.01   97.20

    Device            r/s     rkB/s   rrqm/s ... aqu-sz  %util
    sda              2.08     94.38     0.31 ...   0.03   1.39

Unlike ttop, any deviation from this shape raises StructuralError with the
1-based source line number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..models import DEVICE_STAT_FIELDS, CPUStats, DeviceStats, IOStatReportData, IOStatSnapshot
from .base import StructuralError
from .fields import is_clock_token, iter_lines, parse_float, split_fields

logger = logging.getLogger(__name__)

SYSTEM_INFO_MARKER = "Linux"
CPU_HEADER_PREFIX = "avg-cpu:"
DEVICE_HEADER_PREFIX = "Device"
TIMESTAMP_FORMAT = "%m/%d/%y %H:%M:%S"

CPU_FIELDS: tuple[str, ...] = ("user", "nice", "system", "iowait", "steal", "idle")
DEVICE_LINE_FIELDS = 1 + len(DEVICE_STAT_FIELDS)


def is_timestamp_line(line: str) -> bool:
    """Return True for lines shaped like ``MM/DD/YY HH:MM:SS``."""
    parts = split_fields(line)
    if len(parts) < 2:
        return False
    date_part = parts[0]
    return len(date_part) == 8 and date_part.count("/") == 2


def parse_iostat_timestamp(line: str) -> datetime:
    """Parse a ``MM/DD/YY HH:MM:SS`` line into a UTC datetime."""
    parts = split_fields(line)
    if len(parts) < 2:
        raise ValueError("invalid timestamp line format")

    raw = f"{parts[0]} {parts[1]}"
    if not is_clock_token(parts[1]):
        raise ValueError(f"failed to parse timestamp {raw}: expected HH:MM:SS time")
    try:
        return datetime.strptime(raw, TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    except ValueError as exc:
        raise ValueError(f"failed to parse timestamp {raw}: {exc}") from exc


def parse_cpu_stats_line(line: str) -> CPUStats:
    """Parse the six avg-cpu percentages."""
    tokens = split_fields(line)
    if len(tokens) != len(CPU_FIELDS):
        raise ValueError(f"expected {len(CPU_FIELDS)} CPU stat fields, got {len(tokens)}")

    values: dict[str, float] = {}
    for name, token in zip(CPU_FIELDS, tokens):
        value = parse_float(token)
        if value is None:
            raise ValueError(f"failed to parse {name} CPU: {token!r}")
        values[name] = value
    return CPUStats(**values)


def parse_device_stats_line(line: str) -> DeviceStats:
    """Parse ``<device> <22 numeric columns>``."""
    tokens = split_fields(line)
    if len(tokens) != DEVICE_LINE_FIELDS:
        raise ValueError(
            f"expected {DEVICE_LINE_FIELDS} device stat fields, got {len(tokens)}"
        )

    values: dict[str, float] = {}
    for index, (name, token) in enumerate(zip(DEVICE_STAT_FIELDS, tokens[1:]), start=1):
        value = parse_float(token)
        if value is None:
            raise ValueError(f"failed to parse field {index} ({name}): {token!r}")
        values[name] = value
    return DeviceStats(device=tokens[0], **values)


@dataclass(slots=True)
class _SnapshotBuilder:
    timestamp: datetime
    cpu_stats: CPUStats | None = None
    devices: list[DeviceStats] = field(default_factory=list)

    def build(self) -> IOStatSnapshot:
        # Callers finalize only after the CPU line was seen.
        return IOStatSnapshot(
            timestamp=self.timestamp,
            cpu_stats=self.cpu_stats,
            devices=tuple(self.devices),
        )


@dataclass(slots=True)
class _IOStatState:
    system_info: str = ""
    snapshots: list[IOStatSnapshot] = field(default_factory=list)
    current: _SnapshotBuilder | None = None
    in_device_section: bool = False
    expecting_cpu_stats: bool = False

    def finalize(self) -> None:
        if self.current is not None:
            self.snapshots.append(self.current.build())
            self.current = None


@dataclass(frozen=True, slots=True)
class IOStatParser:
    """Parse an iostat capture into per-timestamp CPU/device snapshots."""

    def parse(self, content: bytes | str) -> IOStatReportData:
        """Parse the whole capture, raising StructuralError on any shape violation."""
        state = _IOStatState()
        line_no = 0

        for line_no, line in iter_lines(content):
            if not line:
                continue
            self._handle_line(state, line_no, line)

        if state.current is not None and state.expecting_cpu_stats:
            raise StructuralError(
                line_no, "expected CPU statistics after timestamp, but reached end of file"
            )
        state.finalize()

        logger.debug("Parsed %d iostat snapshots", len(state.snapshots))
        return IOStatReportData(system_info=state.system_info, snapshots=tuple(state.snapshots))

    def _handle_line(self, state: _IOStatState, line_no: int, line: str) -> None:
        if not state.system_info and SYSTEM_INFO_MARKER in line:
            state.system_info = line
            return

        if is_timestamp_line(line):
            self._start_snapshot(state, line_no, line)
            return

        if line.startswith(CPU_HEADER_PREFIX) and state.current is not None:
            if not state.expecting_cpu_stats:
                raise StructuralError(line_no, "unexpected CPU statistics header")
            state.in_device_section = False
            return

        if (
            state.expecting_cpu_stats
            and state.current is not None
            and state.current.cpu_stats is None
            and not line.startswith(DEVICE_HEADER_PREFIX)
        ):
            self._apply_cpu_stats(state, line_no, line)
            return

        if line.startswith(DEVICE_HEADER_PREFIX):
            state.in_device_section = True
            return

        if state.in_device_section and state.current is not None:
            try:
                device = parse_device_stats_line(line)
            except ValueError as exc:
                raise StructuralError(
                    line_no, f"failed to parse device statistics: {exc}"
                ) from exc
            state.current.devices.append(device)

    @staticmethod
    def _start_snapshot(state: _IOStatState, line_no: int, line: str) -> None:
        if state.current is not None:
            if state.expecting_cpu_stats:
                raise StructuralError(
                    line_no,
                    "expected CPU statistics after timestamp, but found another timestamp",
                )
            state.finalize()

        try:
            timestamp = parse_iostat_timestamp(line)
        except ValueError as exc:
            raise StructuralError(line_no, str(exc)) from exc

        state.current = _SnapshotBuilder(timestamp=timestamp)
        state.in_device_section = False
        state.expecting_cpu_stats = True

    @staticmethod
    def _apply_cpu_stats(state: _IOStatState, line_no: int, line: str) -> None:
        n = len(split_fields(line))
        if n != len(CPU_FIELDS):
            raise StructuralError(
                line_no, f"expected CPU statistics with {len(CPU_FIELDS)} fields, got {n} fields"
            )
        try:
            state.current.cpu_stats = parse_cpu_stats_line(line)
        except ValueError as exc:
            raise StructuralError(line_no, f"failed to parse CPU statistics: {exc}") from exc
        state.expecting_cpu_stats = False


def parse_iostat(content: bytes | str) -> IOStatReportData:
    """Parse iostat output content and extract I/O statistics over time."""
    return IOStatParser().parse(content)
