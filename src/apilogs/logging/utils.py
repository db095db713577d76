"""
Utility functions for apilogs logging.

This module provides helper functions for data sanitization
and diagnostics log housekeeping.
"""

import json
from typing import Any, Dict, List, Tuple
from pathlib import Path
from datetime import datetime, timedelta
from apilogs.constants import (
    LOG_FILE_NAME,
    REDACTION_MARKER,
    SENSITIVE_KEYS,
    UNSANITIZABLE_PLACEHOLDER,
)


def sanitize_data(
    data: Any,
    sensitive_keys: Tuple[str, ...] = SENSITIVE_KEYS,
    marker: str = REDACTION_MARKER,
) -> Any:
    """
    Deep-copy data and redact values stored under sensitive keys.

    Keys are matched exactly (case-sensitive) at any depth reachable through
    dictionaries and lists. The input is never modified.

    Args:
        data: JSON-serializable value to sanitize
        sensitive_keys: Exact key names whose values are redacted
        marker: Replacement value for redacted entries

    Returns:
        Any: Sanitized copy, the input itself for None, or a placeholder
        dict when a dict/list could not be copied (cycles, unsupported types)
    """
    if data is None:
        return data

    try:
        copied = json.loads(json.dumps(data))
    except (TypeError, ValueError, RecursionError):
        if isinstance(data, (dict, list)):
            return dict(UNSANITIZABLE_PLACEHOLDER)
        return data

    return _redact(copied, frozenset(sensitive_keys), marker)


def _redact(data: Any, sensitive_keys: frozenset, marker: str) -> Any:
    if isinstance(data, dict):
        return sanitize_dict(data, sensitive_keys, marker)
    if isinstance(data, list):
        return sanitize_list(data, sensitive_keys, marker)
    return data


def sanitize_dict(
    data: Dict[str, Any], sensitive_keys: frozenset, marker: str = REDACTION_MARKER
) -> Dict[str, Any]:
    """Redact sensitive keys of an already-copied dictionary in place."""
    for key, value in data.items():
        if key in sensitive_keys:
            data[key] = marker
        else:
            data[key] = _redact(value, sensitive_keys, marker)
    return data


def sanitize_list(
    data: List[Any], sensitive_keys: frozenset, marker: str = REDACTION_MARKER
) -> List[Any]:
    """Walk the items of an already-copied list."""
    return [_redact(item, sensitive_keys, marker) for item in data]


def cleanup_old_logs(log_directory: Path, retention_days: int = 7) -> int:
    """
    Clean up rotated diagnostics log files older than the retention period.

    Args:
        log_directory: Directory containing diagnostics log files
        retention_days: Number of days to retain logs

    Returns:
        int: Number of files cleaned up
    """
    if not log_directory.exists():
        return 0

    cutoff_date = datetime.now() - timedelta(days=retention_days)
    cleaned_count = 0

    # Rotated files look like apilogs.log.2024-01-31
    for log_file in log_directory.glob(f"{LOG_FILE_NAME}.log.*"):
        try:
            if log_file.stat().st_mtime < cutoff_date.timestamp():
                log_file.unlink()
                cleaned_count += 1
        except (OSError, ValueError):
            continue

    return cleaned_count
