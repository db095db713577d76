"""
Logging configuration for apilogs.

This module handles cross-platform directory detection for both the
tool's own diagnostics log and the per-project API log store.
"""

import os
import re
import platform
from pathlib import Path
from enum import Enum
from typing import Optional
from dataclasses import dataclass, field
from apilogs.constants import (
    API_LOG_FILE_EXTENSION,
    API_LOG_FILE_PREFIX,
    API_LOGS_DIR_NAME,
    APP_NAME,
    CACHE_DIR_ENV_VAR,
    LOG_FILE_NAME,
    LOG_LEVEL_ENV_VAR,
    LOG_RETENTION_DAYS,
    RECOGNIZED_LOG_EXTENSIONS,
    REDACTION_MARKER,
    SENSITIVE_KEYS,
    TAIL_LINES_TO_SHOW,
)


class LogLevel(Enum):
    """Log levels for apilogs diagnostics"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def _level_from_env() -> LogLevel:
    value = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    if value in [lev.value for lev in LogLevel]:
        return LogLevel(value)
    return LogLevel.INFO


@dataclass
class LogConfig:
    """Configuration for the diagnostics logger"""

    log_filename: str = f"{LOG_FILE_NAME}.log"
    log_retention_days: int = LOG_RETENTION_DAYS

    default_level: LogLevel = field(default_factory=_level_from_env)
    console_level: LogLevel = LogLevel.WARNING

    include_timestamps: bool = True
    sanitize_sensitive_data: bool = True
    sensitive_keys: tuple = SENSITIVE_KEYS


@dataclass
class ApiLogConfig:
    """Configuration for the API call log store"""

    app_name: str = APP_NAME
    file_prefix: str = API_LOG_FILE_PREFIX
    file_extension: str = API_LOG_FILE_EXTENSION
    recognized_extensions: tuple = RECOGNIZED_LOG_EXTENSIONS
    sensitive_keys: tuple = SENSITIVE_KEYS
    redaction_marker: str = REDACTION_MARKER
    tail_default: int = TAIL_LINES_TO_SHOW


def get_log_directory() -> Path:
    """
    Get the diagnostics log directory for the current operating system.

    Returns:
        Path: Platform-specific log directory
    """
    system = platform.system().lower()

    if system == "windows":
        # Windows: %APPDATA%/apilogs/logs/
        base_dir = Path(os.environ.get("APPDATA", ""))
        if not base_dir.exists():
            base_dir = Path.home()
        log_dir = base_dir / LOG_FILE_NAME / "logs"

    elif system == "darwin":
        # macOS: ~/Library/Logs/apilogs/
        log_dir = Path.home() / "Library" / "Logs" / LOG_FILE_NAME

    else:
        # Linux and other Unix-like: ~/.local/share/apilogs/logs/
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        if xdg_data_home:
            base_dir = Path(xdg_data_home)
        else:
            base_dir = Path.home() / ".local" / "share"
        log_dir = base_dir / LOG_FILE_NAME / "logs"

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir
    except OSError:
        # Fall back to the working directory if the platform location is not writable
        fallback_dir = Path.cwd() / "logs"
        fallback_dir.mkdir(exist_ok=True)
        return fallback_dir


def get_log_file_path(config: Optional[LogConfig] = None) -> Path:
    """
    Get the full path to the diagnostics log file.

    Args:
        config: LogConfig instance, uses default if None

    Returns:
        Path: Full path to the log file
    """
    if config is None:
        config = LogConfig()

    return get_log_directory() / config.log_filename


def get_cache_directory(app_name: str = APP_NAME) -> Path:
    """
    Get the platform cache directory for an application.

    The APILOGS_CACHE_DIR environment variable overrides the platform
    default. The directory is not created.

    Args:
        app_name: Application identifier

    Returns:
        Path: Base cache directory for the application
    """
    override = os.environ.get(CACHE_DIR_ENV_VAR)
    if override:
        return Path(override)

    system = platform.system().lower()

    if system == "windows":
        base_dir = Path(os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
        return base_dir / app_name / "Cache"
    if system == "darwin":
        return Path.home() / "Library" / "Caches" / app_name

    xdg_cache_home = os.environ.get("XDG_CACHE_HOME")
    base_dir = Path(xdg_cache_home) if xdg_cache_home else Path.home() / ".cache"
    return base_dir / app_name


def get_project_slug(cwd: str) -> str:
    """Turn a working directory into a directory name, one '-' per non-alphanumeric."""
    return re.sub(r"[^a-zA-Z0-9]", "-", cwd)


def get_api_logs_directory(
    cwd: Optional[str] = None, config: Optional[ApiLogConfig] = None
) -> Path:
    """
    Get the API logs directory for a project.

    Args:
        cwd: Project directory, defaults to the current working directory
        config: ApiLogConfig instance, uses default if None

    Returns:
        Path: <cache dir>/<project slug>/api-logs
    """
    if config is None:
        config = ApiLogConfig()
    if cwd is None:
        cwd = os.getcwd()

    return get_cache_directory(config.app_name) / get_project_slug(cwd) / API_LOGS_DIR_NAME
