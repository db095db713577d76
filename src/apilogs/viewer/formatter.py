"""
Human-readable rendering of API log entries.

render_entry() produces styled rich Text for the terminal; format_entry()
returns the same content as a plain string.
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from rich.text import Text

from .reader import LogRecord, RawRecord

METHOD_STYLES = {
    "GET": "green",
    "POST": "blue",
    "PUT": "yellow",
    "DELETE": "red",
    "PATCH": "magenta",
}

SEVERITY_STYLES = {
    "normal": "green",
    "warning": "yellow",
    "severe": "red",
}


def status_severity(status: int) -> str:
    """Classify an HTTP status: 'normal' (<400), 'warning' (4xx) or 'severe' (5xx+)"""
    if status >= 500:
        return "severe"
    if status >= 400:
        return "warning"
    return "normal"


def method_style(method: str) -> str:
    return METHOD_STYLES.get(method.upper(), "white")


def url_path(url: str) -> str:
    """Path and query of a URL, or the URL itself if it does not parse"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if not parsed.scheme or not parsed.netloc:
        return url
    path = parsed.path or "/"
    return f"{path}?{parsed.query}" if parsed.query else path


def local_time(timestamp: str) -> str:
    """Render an ISO-8601 timestamp in local time"""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return str(timestamp)
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _pretty(value: Any) -> str:
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, indent=2, default=str)
    return text.replace("\n", "\n  ")


def render_entry(entry: LogRecord) -> Text:
    """
    Render one entry: timestamp, service, request line, headers, body,
    status with duration, response body, then error and stack.
    """
    if isinstance(entry, RawRecord):
        return Text(entry.raw)

    result = Text()

    if entry.get("timestamp"):
        result.append(f"[{local_time(entry['timestamp'])}] ", style="grey50")

    if entry.get("service"):
        result.append(f"{entry['service']} ", style="bold blue")

    method = str(entry.get("method") or "UNKNOWN")
    result.append(method, style=f"bold {method_style(method)}")
    result.append(f" {url_path(str(entry.get('url') or ''))}\n", style="bold")

    headers: Optional[Dict[str, str]] = entry.get("headers")
    if headers:
        result.append(f"  Headers: {_pretty(headers)}\n", style="grey50")

    if entry.get("body"):
        result.append(f"  Body: {_pretty(entry['body'])}\n", style="grey50")

    status = entry.get("statusCode")
    duration = entry.get("durationMs")
    if isinstance(status, int):
        result.append(
            f"  Response: {status}", style=SEVERITY_STYLES[status_severity(status)]
        )
        if duration is not None:
            result.append(f" ({duration}ms)", style="grey50")
        result.append("\n")
    elif duration is not None:
        result.append(f"  Duration: {duration}ms\n", style="grey50")

    if entry.get("responseBody"):
        result.append(f"  Response Body: {_pretty(entry['responseBody'])}\n", style="grey50")

    error = entry.get("error")
    if error:
        message = error.get("message", error) if isinstance(error, dict) else error
        result.append(f"  Error: {message}\n", style="red")
        if isinstance(error, dict) and error.get("stack"):
            result.append(f"  Stack: {_pretty(error['stack'])}\n", style="grey50")

    result.rstrip()
    return result


def format_entry(entry: LogRecord) -> str:
    """Plain-text rendering of an entry; raw records come back verbatim"""
    return render_entry(entry).plain
