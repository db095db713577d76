"""
apilogs Logging Module

Diagnostics logging for the apilogs tool itself, plus the configuration
and sanitization helpers shared with the API call log store.

Key Features:
- Single diagnostics log file with daily rotation
- Cross-platform log and cache directory detection
- Automatic sanitization of sensitive data
"""

from .logger import get_logger, setup_logging
from .config import (
    ApiLogConfig,
    LogConfig,
    LogLevel,
    get_api_logs_directory,
    get_cache_directory,
    get_project_slug,
)
from .utils import sanitize_data

__all__ = [
    "get_logger",
    "setup_logging",
    "LogLevel",
    "LogConfig",
    "ApiLogConfig",
    "get_api_logs_directory",
    "get_cache_directory",
    "get_project_slug",
    "sanitize_data",
]
