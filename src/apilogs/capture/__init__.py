"""
API call capture: sanitize, classify and append one JSON line per call.
"""

from .models import LogEntry
from .services import classify_service
from .writer import ApiLogWriter, get_default_writer, log_api_call
from .transport import (
    AsyncLoggingTransport,
    LoggingTransport,
    create_async_client,
    create_client,
    enable_api_logging,
)
from .wrapper import with_api_logging

__all__ = [
    "LogEntry",
    "classify_service",
    "ApiLogWriter",
    "get_default_writer",
    "log_api_call",
    "LoggingTransport",
    "AsyncLoggingTransport",
    "create_client",
    "create_async_client",
    "enable_api_logging",
    "with_api_logging",
]
