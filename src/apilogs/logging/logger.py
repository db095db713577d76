"""
Main logging module for apilogs.

This module configures the tool's diagnostics logger: a daily rotating
file plus warnings and errors on stderr.
"""

import logging
import logging.handlers
import sys
from typing import Optional, Dict

from .config import LogConfig, LogLevel, get_log_file_path
from .formatters import DiagnosticsFormatter
from .utils import cleanup_old_logs


_loggers: Dict[str, logging.Logger] = {}
_logging_configured = False
_log_config: Optional[LogConfig] = None


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Set up the apilogs diagnostics logging system.

    Args:
        config: LogConfig instance, uses default if None
        force_reconfigure: Force reconfiguration even if already set up
    """
    global _logging_configured, _log_config

    if _logging_configured and not force_reconfigure:
        return

    if config is None:
        config = LogConfig()

    _log_config = config

    log_file_path = get_log_file_path(config)

    root_logger = logging.getLogger("apilogs")
    root_logger.setLevel(getattr(logging, config.default_level.value))
    root_logger.handlers.clear()

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_file_path,
        when='midnight',
        interval=1,
        backupCount=config.log_retention_days,
        encoding='utf-8',
        utc=False
    )
    file_handler.setLevel(getattr(logging, config.default_level.value))
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setFormatter(DiagnosticsFormatter(
        include_timestamps=config.include_timestamps,
        sanitize_sensitive=config.sanitize_sensitive_data,
        sensitive_keys=config.sensitive_keys
    ))
    root_logger.addHandler(file_handler)

    if config.console_level != LogLevel.ERROR or config.default_level == LogLevel.DEBUG:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, config.console_level.value))
        console_handler.setFormatter(DiagnosticsFormatter(
            include_timestamps=False,
            sanitize_sensitive=config.sanitize_sensitive_data,
            sensitive_keys=config.sensitive_keys
        ))
        root_logger.addHandler(console_handler)

    root_logger.propagate = False

    try:
        cleanup_old_logs(log_file_path.parent, config.log_retention_days)
    except OSError:
        pass

    _logging_configured = True

    get_logger("apilogs.setup").debug(
        f"Logging initialized - File: {log_file_path}, Level: {config.default_level.value}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified name.

    Args:
        name: Logger name (e.g., 'apilogs.capture')

    Returns:
        logging.Logger: Logger instance
    """
    if not _logging_configured:
        setup_logging()

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]
