"""Parser interfaces and shared error types."""

from __future__ import annotations

from typing import Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class CaptureParser(Protocol[T_co]):
    """Parser interface: turn a whole capture buffer into structured report data."""

    def parse(self, content: bytes | str) -> T_co:
        """Parse the full capture content."""
        ...


class StructuralError(ValueError):
    """A capture violated the expected block structure at a given line."""

    def __init__(self, line_no: int, reason: str) -> None:
        super().__init__(f"line {line_no}: {reason}")
        self.line_no = line_no
        self.reason = reason
