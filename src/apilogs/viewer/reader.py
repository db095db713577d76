"""
Reading API log files back from the logs directory.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from apilogs.constants import (
    API_LOG_FILE_EXTENSION,
    API_LOG_FILE_PREFIX,
    RECOGNIZED_LOG_EXTENSIONS,
)
from apilogs.logging import get_logger


@dataclass
class LogFileInfo:
    """A log file in the logs directory"""
    name: str
    size: int
    created_at: datetime
    path: Path


@dataclass
class RawRecord:
    """A line that could not be parsed as a JSON object, kept verbatim"""
    raw: str


LogRecord = Union[Dict[str, Any], RawRecord]


def _created_timestamp(path: Path) -> float:
    stat = path.stat()
    # Birth time where the platform records it, otherwise last modification
    return getattr(stat, "st_birthtime", stat.st_mtime)


def list_log_files(
    log_dir: Path, extensions: Sequence[str] = RECOGNIZED_LOG_EXTENSIONS
) -> List[LogFileInfo]:
    """
    List log files in a directory, newest first by creation time.

    Args:
        log_dir: Logs directory
        extensions: File suffixes that count as log files

    Returns:
        List[LogFileInfo]: Empty when the directory is empty or missing
    """
    log_dir = Path(log_dir)
    if not log_dir.is_dir():
        return []

    files = []
    for path in log_dir.iterdir():
        if path.is_file() and path.name.endswith(tuple(extensions)):
            files.append(
                LogFileInfo(
                    name=path.name,
                    size=path.stat().st_size,
                    created_at=datetime.fromtimestamp(_created_timestamp(path)),
                    path=path,
                )
            )

    files.sort(key=lambda f: (f.created_at, f.name), reverse=True)
    return files


def latest_log_file(log_dir: Path) -> Optional[LogFileInfo]:
    """Most recently created log file, or None"""
    files = list_log_files(log_dir)
    return files[0] if files else None


def parse_line(line: str) -> LogRecord:
    try:
        parsed = json.loads(line)
    except ValueError:
        return RawRecord(line)
    if not isinstance(parsed, dict):
        return RawRecord(line)
    return parsed


def read_entries(path: Path) -> List[LogRecord]:
    """
    Read every non-empty line of a log file, oldest first.

    Lines that are not JSON objects come back as RawRecord.
    """
    content = Path(path).read_text(encoding="utf-8")
    return [parse_line(line) for line in content.split("\n") if line]


def get_api_logs(log_dir: Path) -> List[Path]:
    """
    Paths of daily API log files, newest date first.

    Returns an empty list if the directory cannot be read.
    """
    log_dir = Path(log_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        names = [
            p.name
            for p in log_dir.iterdir()
            if p.name.startswith(API_LOG_FILE_PREFIX)
            and p.name.endswith(API_LOG_FILE_EXTENSION)
        ]
    except OSError as e:
        get_logger("apilogs.viewer").error(f"Error getting API logs: {e}")
        return []

    # The date embedded in the name sorts lexically
    names.sort(reverse=True)
    return [log_dir / name for name in names]
