"""Helpers for whitespace-separated tabular capture formats."""

from __future__ import annotations

import re
from collections.abc import Iterator

TEXT_ENCODING = "utf-8"
DECODE_ERRORS = "replace"

# Hours may be one digit; minutes and seconds are always two.
_CLOCK_RE = re.compile(r"\d{1,2}:\d{2}:\d{2}", re.ASCII)


def split_fields(line: str) -> list[str]:
    """Split a line on runs of whitespace."""
    return line.split()


def _is_plain_number(token: str) -> bool:
    # int()/float() also take digit-group underscores and non-ASCII digits.
    return token.isascii() and "_" not in token


def parse_int(token: str) -> int | None:
    """Parse an integer token, or None if it is not one."""
    if not _is_plain_number(token):
        return None
    try:
        return int(token)
    except ValueError:
        return None


def parse_float(token: str) -> float | None:
    """Parse a float token, or None if it is not one."""
    if not _is_plain_number(token):
        return None
    try:
        return float(token)
    except ValueError:
        return None


def is_clock_token(token: str) -> bool:
    """Return True for ``H:MM:SS`` / ``HH:MM:SS`` tokens."""
    return _CLOCK_RE.fullmatch(token) is not None


def float_or(token: str, default: float = 0.0) -> float:
    """Parse a float token, falling back to ``default``."""
    value = parse_float(token)
    return default if value is None else value


def iter_lines(content: bytes | str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, stripped line) for every source line.

    Blank lines are yielded too so numbering matches the source exactly. Only
    ``\\n`` separates lines (a trailing ``\\r`` is stripped with the whitespace).
    """
    if isinstance(content, bytes):
        text = content.decode(TEXT_ENCODING, errors=DECODE_ERRORS)
    else:
        text = content
    if not text:
        return

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line_no, line in enumerate(lines, start=1):
        yield line_no, line.strip()
