"""
apilogs: record outbound API calls as daily JSON-line files and inspect them.
"""

from apilogs.capture import (
    ApiLogWriter,
    AsyncLoggingTransport,
    LogEntry,
    LoggingTransport,
    classify_service,
    create_async_client,
    create_client,
    enable_api_logging,
    log_api_call,
    with_api_logging,
)
from apilogs.commands.apilogs import ApiLogsCommand

__all__ = [
    "ApiLogWriter",
    "AsyncLoggingTransport",
    "LogEntry",
    "LoggingTransport",
    "classify_service",
    "create_async_client",
    "create_client",
    "enable_api_logging",
    "log_api_call",
    "with_api_logging",
    "ApiLogsCommand",
]

__version__ = "1.0.0"
