"""Report formatting for cosmology results."""

from .formatters import (
    BATCH_COLUMNS,
    batch_row,
    build_batch_frame,
    format_html,
    format_long,
    format_parameters,
    format_parameters_html,
    format_short,
    format_short_header,
    write_batch_report,
)

__all__ = [
    "BATCH_COLUMNS",
    "batch_row",
    "build_batch_frame",
    "format_html",
    "format_long",
    "format_parameters",
    "format_parameters_html",
    "format_short",
    "format_short_header",
    "write_batch_report",
]
