"""
Reading and rendering API log files.
"""

from .reader import (
    LogFileInfo,
    LogRecord,
    RawRecord,
    get_api_logs,
    latest_log_file,
    list_log_files,
    read_entries,
)
from .formatter import format_entry, render_entry, status_severity

__all__ = [
    "LogFileInfo",
    "LogRecord",
    "RawRecord",
    "get_api_logs",
    "latest_log_file",
    "list_log_files",
    "read_entries",
    "format_entry",
    "render_entry",
    "status_severity",
]
