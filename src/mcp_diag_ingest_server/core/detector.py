"""Content-first file type detection for uploaded diagnostic captures."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from .archive import list_entry_names
from .models import DetectedType

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = frozenset({".zip", ".tar", ".tar.gz", ".tgz", ".gz"})
SNIFF_BYTES = 1000

# Archive tallies are resolved in this order, first non-zero wins.
_ARCHIVE_PRIORITY: tuple[DetectedType, ...] = (
    DetectedType.JFR,
    DetectedType.TTOP,
    DetectedType.IOSTAT,
)


def split_name(filename: str) -> tuple[str, str]:
    """Return the lowercase (base name, extension) of a slash-separated path.

    The extension is everything from the last dot of the base name, dot included.
    """
    base = filename.rsplit("/", 1)[-1].lower()
    idx = base.rfind(".")
    ext = base[idx:] if idx != -1 else ""
    return base, ext


def is_archive_name(filename: str) -> bool:
    _, ext = split_name(filename)
    return ext in ARCHIVE_EXTENSIONS


def detect_by_name(filename: str) -> DetectedType:
    """Classify using only the file name."""
    base, ext = split_name(filename)
    if ext == ".jfr":
        return DetectedType.JFR
    if "ttop" in base and ext in (".txt", ""):
        return DetectedType.TTOP
    if "iostat" in base:
        return DetectedType.IOSTAT
    return DetectedType.UNKNOWN


def looks_like_ttop(content: bytes) -> bool:
    """ttop captures carry a PID/USER column header near the top."""
    head = content[:SNIFF_BYTES]
    return b"PID" in head and b"USER" in head and (b"TIME" in head or b"%CPU" in head)


def looks_like_iostat(content: bytes) -> bool:
    """iostat captures carry a Device column header with rate columns."""
    head = content[:SNIFF_BYTES]
    return b"Device" in head and (b"tps" in head or b"kB_read/s" in head or b"r/s" in head)


def classify_entry_names(names: Iterable[str]) -> DetectedType:
    """Pick the archive's dominant type from its member names."""
    tally = Counter(detect_by_name(name) for name in names)
    for candidate in _ARCHIVE_PRIORITY:
        if tally[candidate] > 0:
            return candidate
    return DetectedType.ARCHIVE


def detect_archive(content: bytes) -> DetectedType:
    names = list_entry_names(content)
    if not names:
        return DetectedType.ARCHIVE
    logger.debug("Classifying archive with %d entries", len(names))
    return classify_entry_names(names)


def detect_file_type(filename: str, content: bytes) -> DetectedType:
    """Detect a capture's type: archives by members, then content, then file name.

    Never raises; unrecognized input yields UNKNOWN (or ARCHIVE for containers).
    """
    if is_archive_name(filename):
        return detect_archive(content)

    if content:
        if looks_like_ttop(content):
            return DetectedType.TTOP
        if looks_like_iostat(content):
            return DetectedType.IOSTAT

    return detect_by_name(filename)
