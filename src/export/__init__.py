"""Export of stored assertions: extrema, JSON and CSV reports."""

from src.export.extrema import (
    EPS,
    TRACKED_STATISTICS,
    ExtremumResult,
    ExtremumType,
    find_extrema,
)
from src.export.renderers import render_csv, render_json
from src.export.service import GetAssertionsService

__all__ = [
    "EPS",
    "TRACKED_STATISTICS",
    "ExtremumResult",
    "ExtremumType",
    "find_extrema",
    "render_csv",
    "render_json",
    "GetAssertionsService",
]
