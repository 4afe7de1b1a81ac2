"""Capture parsers (ttop, iostat) and shared field helpers."""

from __future__ import annotations

from .base import CaptureParser, StructuralError
from .iostat import IOStatParser, parse_iostat
from .ttop import TTopParser, parse_ttop

__all__ = [
    "CaptureParser",
    "IOStatParser",
    "StructuralError",
    "TTopParser",
    "parse_iostat",
    "parse_ttop",
]
