"""Process-activity (ttop) capture parser.

ttop output is a sequence of ``top``-style blocks::

    top - 12:02:03 up  3:07,  0 users,  load average: 3.18, 1.16, 0.41
    Threads: 262 total,   6 running, 256 sleeping,   0 stopped,   0 zombie
    MiB Mem :  16008.2 total,  10953.7 free,   3713.5 used,   1341.1 buff/cache
    MiB Swap:      0.0 total,      0.0 free,      0.0 used.  12032.0 avail Mem
      PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
     1234 dremio    20   0   12.3g   4.1g  35512 R  99.9  26.0   1:02.33 C2 CompilerThre

The parser is lenient: malformed summary lines and thread rows are skipped, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from ..models import SystemMemory, ThreadCounts, ThreadInfo, TTopReportData, TTopSnapshot
from .fields import float_or, is_clock_token, iter_lines, parse_float, parse_int, split_fields

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "top - "
THREADS_PREFIX = "Threads:"
MEM_PREFIX = "MiB Mem"
SWAP_PREFIX = "MiB Swap"
AVAIL_MARKER = "avail Mem"

MIN_THREAD_FIELDS = 12
_CPU_FIELD = 8
_MEM_FIELD = 9
_COMMAND_FIELD = 11

_COUNT_LABELS = ("total", "running", "sleeping", "stopped", "zombie")
_MEM_LABELS = {
    "total": "mem_total",
    "free": "mem_free",
    "used": "mem_used",
    "buff/cache": "mem_buff_cache",
}
_SWAP_LABELS = {
    "total": "swap_total",
    "free": "swap_free",
    "used": "swap_used",
}


def parse_top_timestamp(line: str, *, today: date | None = None) -> datetime | None:
    """Parse the HH:MM:SS token of a ``top - `` line onto today's date."""
    parts = split_fields(line)
    if len(parts) < 3 or not is_clock_token(parts[2]):
        return None
    try:
        t = datetime.strptime(parts[2], "%H:%M:%S").time()
    except ValueError:
        return None
    return datetime.combine(today or date.today(), t)


def parse_thread_counts(line: str) -> ThreadCounts | None:
    """Parse ``Threads: N total, M running, ...``; None unless there are 5 parts."""
    parts = line.removeprefix(THREADS_PREFIX).strip().split(",")
    if len(parts) != len(_COUNT_LABELS):
        return None

    counts: dict[str, int] = {}
    for part in parts:
        tokens = split_fields(part)
        if len(tokens) < 2:
            continue
        value = parse_int(tokens[0])
        if value is None:
            continue
        if tokens[1] in _COUNT_LABELS:
            counts[tokens[1]] = value
    return ThreadCounts(**counts)


def _labelled_values(parts: Sequence[str], labels: dict[str, str]) -> dict[str, float]:
    """Map ``<value> <label>`` parts onto SystemMemory attribute names."""
    out: dict[str, float] = {}
    for part in parts:
        tokens = split_fields(part)
        if len(tokens) < 2:
            continue
        value = parse_float(tokens[0])
        if value is None:
            continue
        name = labels.get(tokens[1].removesuffix("."))
        if name is not None:
            out[name] = value
    return out


def parse_memory_line(line: str, memory: SystemMemory) -> SystemMemory:
    """Apply a ``MiB Mem :`` line to ``memory``; unchanged if malformed."""
    rest = line.removeprefix(MEM_PREFIX).strip()
    rest = rest.removeprefix(":").strip()

    parts = rest.split(",")
    if len(parts) != len(_MEM_LABELS):
        logger.debug("Ignoring memory line with %d parts: %r", len(parts), line)
        return memory
    return replace(memory, **_labelled_values(parts, _MEM_LABELS))


def parse_swap_line(line: str, memory: SystemMemory) -> SystemMemory:
    """Apply a ``MiB Swap:`` line (plus trailing ``avail Mem``) to ``memory``."""
    rest = line.removeprefix(SWAP_PREFIX + ":").strip()
    updates: dict[str, float] = {}

    idx = rest.find(AVAIL_MARKER)
    if idx != -1:
        before = rest[:idx].strip()
        tokens = split_fields(before)
        if not tokens:
            return memory
        avail = parse_float(tokens[-1])
        if avail is not None:
            updates["mem_avail"] = avail
        rest = before.removesuffix(tokens[-1]).strip()

    rest = rest.removesuffix(".").strip()
    parts = rest.split(",")
    if len(parts) != len(_SWAP_LABELS):
        logger.debug("Ignoring swap line with %d parts: %r", len(parts), line)
        return replace(memory, **updates)

    updates.update(_labelled_values(parts, _SWAP_LABELS))
    return replace(memory, **updates)


def parse_thread_line(line: str) -> ThreadInfo | None:
    """Parse a ``PID USER PR NI VIRT RES SHR S %CPU %MEM TIME+ COMMAND`` row.

    Rows with too few columns or a non-integer PID are rejected; unparsable
    %CPU/%MEM values default to 0.0.
    """
    tokens = split_fields(line)
    if len(tokens) < MIN_THREAD_FIELDS:
        return None

    pid = parse_int(tokens[0])
    if pid is None:
        return None

    return ThreadInfo(
        pid=pid,
        user=tokens[1],
        cpu=float_or(tokens[_CPU_FIELD]),
        mem=float_or(tokens[_MEM_FIELD]),
        command=" ".join(tokens[_COMMAND_FIELD:]),
    )


@dataclass(slots=True)
class _SnapshotBuilder:
    """Mutable accumulator for the snapshot currently being read."""

    timestamp: datetime
    thread_counts: ThreadCounts | None = None
    system_memory: SystemMemory | None = None
    threads: list[ThreadInfo] = field(default_factory=list)

    def build(self) -> TTopSnapshot:
        return TTopSnapshot(
            timestamp=self.timestamp,
            thread_counts=self.thread_counts,
            system_memory=self.system_memory,
            threads=tuple(self.threads),
        )


@dataclass(slots=True)
class _TTopState:
    snapshots: list[TTopSnapshot] = field(default_factory=list)
    current: _SnapshotBuilder | None = None

    def finalize(self) -> None:
        if self.current is not None:
            self.snapshots.append(self.current.build())
            self.current = None


def _start_snapshot(state: _TTopState, line: str) -> None:
    state.finalize()
    ts = parse_top_timestamp(line)
    if ts is None:
        # No usable time on the header line; fall back to wall-clock time.
        logger.debug("Unparsable ttop header timestamp: %r", line)
        ts = datetime.now()
    state.current = _SnapshotBuilder(timestamp=ts)


def _apply_thread_counts(state: _TTopState, line: str) -> None:
    counts = parse_thread_counts(line)
    if counts is not None:
        state.current.thread_counts = counts


def _apply_memory(state: _TTopState, line: str) -> None:
    memory = state.current.system_memory or SystemMemory()
    state.current.system_memory = parse_memory_line(line, memory)


def _apply_swap(state: _TTopState, line: str) -> None:
    memory = state.current.system_memory or SystemMemory()
    state.current.system_memory = parse_swap_line(line, memory)


def _apply_thread_row(state: _TTopState, line: str) -> None:
    info = parse_thread_line(line)
    if info is not None:
        state.current.threads.append(info)


def _is_open(state: _TTopState) -> bool:
    return state.current is not None


_Rule = tuple[Callable[[_TTopState, str], bool], Callable[[_TTopState, str], None]]

# First matching rule wins.
_RULES: tuple[_Rule, ...] = (
    (lambda s, line: line.startswith(SNAPSHOT_PREFIX), _start_snapshot),
    (lambda s, line: line.startswith(THREADS_PREFIX) and _is_open(s), _apply_thread_counts),
    (lambda s, line: line.startswith(MEM_PREFIX) and _is_open(s), _apply_memory),
    (lambda s, line: line.startswith(SWAP_PREFIX) and _is_open(s), _apply_swap),
    (lambda s, line: _is_open(s), _apply_thread_row),
)


@dataclass(frozen=True, slots=True)
class TTopParser:
    """Parse a ttop capture into per-timestamp snapshots."""

    def parse(self, content: bytes | str) -> TTopReportData:
        """Parse the whole capture; malformed sub-content is skipped, not raised."""
        state = _TTopState()
        for _, line in iter_lines(content):
            if not line:
                continue
            for matches, handle in _RULES:
                if matches(state, line):
                    handle(state, line)
                    break

        state.finalize()
        logger.debug("Parsed %d ttop snapshots", len(state.snapshots))
        return TTopReportData(snapshots=tuple(state.snapshots))


def parse_ttop(content: bytes | str) -> TTopReportData:
    """Parse ttop output content and extract thread information over time."""
    return TTopParser().parse(content)
