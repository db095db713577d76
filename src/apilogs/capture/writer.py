"""
Append-only writer for daily API log files.

Each entry becomes one JSON line in <logs dir>/api-log-YYYY-MM-DD.jsonl.
Writing is best-effort: failures go to a diagnostics sink and never reach
the code whose call is being logged.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from apilogs.logging import ApiLogConfig, get_api_logs_directory, get_logger
from apilogs.logging.utils import sanitize_data
from .models import LogEntry

DiagnosticsSink = Callable[[str, BaseException], None]

SANITIZED_FIELDS = ("headers", "body", "responseBody")


def report_to_logger(message: str, exc: BaseException) -> None:
    """Default diagnostics sink: record the failure in the diagnostics log."""
    get_logger("apilogs.capture").error(f"{message}: {exc}")


class ApiLogWriter:
    """Writes sanitized log entries to the current day's file."""

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        config: Optional[ApiLogConfig] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
    ):
        self.config = config or ApiLogConfig()
        self.log_dir = Path(log_dir) if log_dir else get_api_logs_directory(config=self.config)
        self.diagnostics = diagnostics or report_to_logger

    def ensure_directory(self) -> Path:
        """Create the logs directory (and parents) if missing"""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        return self.log_dir

    def get_log_file_path(self, day: Optional[date] = None) -> Path:
        """
        Get the log file path for a calendar day, creating the directory.

        Args:
            day: Local calendar date, defaults to today

        Returns:
            Path: e.g. <logs dir>/api-log-2024-05-01.jsonl
        """
        day = day or date.today()
        self.ensure_directory()
        return self.log_dir / f"{self.config.file_prefix}{day.isoformat()}{self.config.file_extension}"

    def sanitize_entry(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        sanitized = dict(entry)
        for key in SANITIZED_FIELDS:
            if key in sanitized:
                sanitized[key] = sanitize_data(
                    sanitized[key],
                    self.config.sensitive_keys,
                    self.config.redaction_marker,
                )
        return sanitized

    def append(self, entry: Union[LogEntry, Dict[str, Any]]) -> None:
        """
        Sanitize an entry and append it as one JSON line to today's file.

        Never raises; failures are reported to the diagnostics sink.
        """
        try:
            data = entry.to_dict() if isinstance(entry, LogEntry) else dict(entry)
            line = json.dumps(self.sanitize_entry(data), default=str) + "\n"
            log_path = self.get_log_file_path()
            # One unbuffered write per entry so concurrent appends stay whole
            with open(log_path, "ab", buffering=0) as f:
                f.write(line.encode("utf-8"))
        except Exception as e:
            try:
                self.diagnostics("Error writing API log", e)
            except Exception:
                pass


_default_writer: Optional[ApiLogWriter] = None


def get_default_writer() -> ApiLogWriter:
    """Writer for the current project's logs directory, created on first use"""
    global _default_writer
    if _default_writer is None:
        _default_writer = ApiLogWriter()
    return _default_writer


def log_api_call(
    url: str,
    method: str,
    duration_ms: int,
    headers: Optional[Dict[str, str]] = None,
    body: Any = None,
    response_headers: Optional[Dict[str, str]] = None,
    response_body: Any = None,
    status_code: Optional[int] = None,
    error: Any = None,
    service: str = "unknown",
    writer: Optional[ApiLogWriter] = None,
) -> None:
    """
    Record one API call.

    Args:
        url: Full request URL
        method: HTTP method
        duration_ms: Elapsed wall-clock time in milliseconds
        headers: Request headers
        body: Request payload
        response_headers: Response headers, success only
        response_body: Response payload
        status_code: HTTP status if known
        error: Raised exception or value, failure only
        service: Service label
        writer: Target writer, defaults to the project's writer
    """
    writer = writer or get_default_writer()
    writer.append(
        LogEntry(
            url=url,
            method=method,
            service=service,
            headers=headers,
            body=body,
            response_headers=response_headers,
            response_body=response_body if response_body else None,
            status_code=status_code,
            error=error,
            duration_ms=duration_ms,
        )
    )
