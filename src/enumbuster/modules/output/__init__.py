"""Rendering and persistence of probe outcomes."""

from .display import format_line, render_error, render_found, status_style
from .sink import ResultSink, create_progress_panel, create_summary_table
from .writer import OUTPUT_FORMATS, ResultFileWriter, resolve_format

__all__ = [
    "OUTPUT_FORMATS",
    "ResultFileWriter",
    "ResultSink",
    "create_progress_panel",
    "create_summary_table",
    "format_line",
    "render_error",
    "render_found",
    "resolve_format",
    "status_style",
]
