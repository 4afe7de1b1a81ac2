from __future__ import annotations

from mcp_diag_ingest_server.core.formats.fields import (
    float_or,
    is_clock_token,
    iter_lines,
    parse_float,
    parse_int,
    split_fields,
)


def test_split_fields_collapses_whitespace() -> None:
    assert split_fields("  1234 dremio\t 20   0 ") == ["1234", "dremio", "20", "0"]
    assert split_fields("   ") == []


def test_numeric_parsers() -> None:
    assert parse_int("1234") == 1234
    assert parse_int("12.3g") is None
    assert parse_float("97.20") == 97.2
    assert parse_float("n/a") is None
    assert float_or("n/a") == 0.0
    assert float_or("n/a", default=-1.0) == -1.0
    assert float_or("5.5") == 5.5


def test_iter_lines_numbers_every_line() -> None:
    content = b"first\n\n  third  \r\nlast\n"
    assert list(iter_lines(content)) == [(1, "first"), (2, ""), (3, "third"), (4, "last")]


def test_iter_lines_empty_and_undecodable() -> None:
    assert list(iter_lines(b"")) == []
    lines = list(iter_lines(b"ok \xff\xfe\n"))
    assert len(lines) == 1
    assert lines[0][1].startswith("ok")


def test_numeric_parsers_reject_underscores_and_non_ascii_digits() -> None:
    assert parse_int("1_000") is None
    assert parse_float("1_0") is None
    assert parse_int("١٢") is None
    assert parse_float("٣.5") is None
    assert float_or("1_0") == 0.0


def test_is_clock_token() -> None:
    assert is_clock_token("12:07:20")
    assert is_clock_token("9:07:20")
    assert not is_clock_token("12:7:20")
    assert not is_clock_token("12:07:2")
    assert not is_clock_token("123:07:20")
    assert not is_clock_token("12:07")
