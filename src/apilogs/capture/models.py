"""
Data model for API call log entries.
"""

import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from apilogs.constants import UNKNOWN_SERVICE


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string, e.g. 2024-05-01T12:00:00.123Z"""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def describe_error(error: Any) -> Any:
    """
    Convert a raised value into its logged form.

    Exceptions become {"message", "stack"}; anything else is kept as-is.
    """
    if isinstance(error, BaseException):
        return {
            "message": str(error),
            "stack": "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ).rstrip(),
        }
    return error


@dataclass
class LogEntry:
    """One outbound call: request, response or error, and timing."""

    url: str
    method: str
    service: str = UNKNOWN_SERVICE
    headers: Optional[Dict[str, str]] = None
    body: Any = None
    response_headers: Optional[Dict[str, str]] = None
    response_body: Any = None
    status_code: Optional[int] = None
    error: Any = None
    duration_ms: int = 0
    timestamp: str = field(default_factory=utc_timestamp)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the on-disk key layout, omitting absent optional fields."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "id": self.id,
            "service": self.service,
            "url": self.url,
            "method": self.method,
        }
        optional = (
            ("headers", self.headers),
            ("body", self.body),
            ("responseHeaders", self.response_headers),
            ("responseBody", self.response_body),
            ("statusCode", self.status_code),
            ("error", describe_error(self.error) if self.error is not None else None),
        )
        for key, value in optional:
            if value is not None:
                data[key] = value
        data["durationMs"] = int(self.duration_ms)
        return data
