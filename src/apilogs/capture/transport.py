"""
httpx transports that log every request they carry.

LoggingTransport and AsyncLoggingTransport decorate the real transport of
an httpx client. Request and response bodies are captured without taking
them away from the caller. The caller receives the status, headers and
body the wrapped transport produced, or the very exception it raised.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from apilogs.constants import REQUEST_BODY_UNREADABLE, RESPONSE_BODY_UNREADABLE
from apilogs.logging import get_logger
from .models import LogEntry
from .services import classify_service
from .writer import ApiLogWriter, get_default_writer


def parse_body_text(text: str) -> Any:
    """Parse text as JSON when it looks like an object or array, else keep it"""
    if text and (text.startswith("{") or text.startswith("[")):
        return json.loads(text)
    return text


def elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


@dataclass
class CapturedRequest:
    url: str
    method: str
    headers: Dict[str, str]
    body: Any = None

    @classmethod
    def from_request(cls, request: httpx.Request) -> "CapturedRequest":
        return cls(
            url=str(request.url),
            method=request.method,
            headers=dict(request.headers),
            body=read_request_body(request),
        )


def read_request_body(request: httpx.Request) -> Any:
    """
    Read a request body without consuming it.

    Only already-buffered content is read; a streaming body is left alone
    and reported with a placeholder.
    """
    try:
        content = request.content
    except httpx.RequestNotRead:
        return REQUEST_BODY_UNREADABLE
    if not content:
        return None
    try:
        return parse_body_text(content.decode("utf-8"))
    except ValueError:
        return REQUEST_BODY_UNREADABLE


def decode_response_body(response: httpx.Response, raw: Optional[bytes]) -> Any:
    """Decode the body of a buffered response, or of raw bytes read from it"""
    try:
        if raw is None:
            text = response.text
        else:
            text = httpx.Response(
                response.status_code, headers=response.headers, content=raw
            ).text
        return parse_body_text(text)
    except (httpx.HTTPError, httpx.StreamError, ValueError):
        return RESPONSE_BODY_UNREADABLE


class ReplayStream(httpx.SyncByteStream, httpx.AsyncByteStream):
    """Byte stream that hands already-read raw bytes to the real caller"""

    def __init__(self, raw: bytes):
        self._raw = raw

    def __iter__(self):
        yield self._raw

    async def __aiter__(self):
        yield self._raw


def replay(response: httpx.Response, request: httpx.Request, raw: bytes) -> httpx.Response:
    return httpx.Response(
        status_code=response.status_code,
        headers=response.headers,
        stream=ReplayStream(raw),
        request=request,
        extensions=response.extensions,
    )


class _CallRecorder:
    """Shared bookkeeping for the sync and async transports"""

    def __init__(self, writer: Optional[ApiLogWriter]):
        self._writer = writer
        self.logger = get_logger("apilogs.capture.transport")

    @property
    def writer(self) -> ApiLogWriter:
        return self._writer or get_default_writer()

    def capture(self, request: httpx.Request) -> CapturedRequest:
        try:
            return CapturedRequest.from_request(request)
        except Exception as e:
            self.logger.warning(f"Could not capture request details: {e}")
            return CapturedRequest(str(request.url), request.method, {}, REQUEST_BODY_UNREADABLE)

    def record(
        self,
        captured: CapturedRequest,
        started: float,
        response: Optional[httpx.Response] = None,
        response_body: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        try:
            entry = LogEntry(
                url=captured.url,
                method=captured.method,
                service=classify_service(captured.url),
                headers=captured.headers,
                body=captured.body,
                response_headers=dict(response.headers) if response is not None else None,
                response_body=response_body if response_body else None,
                status_code=response.status_code if response is not None else None,
                error=error,
                duration_ms=elapsed_ms(started),
            )
        except Exception as e:
            self.logger.error(f"Could not build API log entry: {e}")
            return
        self.writer.append(entry)


class LoggingTransport(httpx.BaseTransport):
    """
    Transport decorator for httpx.Client.

    Args:
        transport: Transport that actually sends requests, defaults to
            httpx.HTTPTransport()
        writer: Log writer, defaults to the project's writer
    """

    def __init__(
        self,
        transport: Optional[httpx.BaseTransport] = None,
        writer: Optional[ApiLogWriter] = None,
    ):
        self._transport = transport or httpx.HTTPTransport()
        self._recorder = _CallRecorder(writer)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        captured = self._recorder.capture(request)
        started = time.monotonic()

        try:
            response = self._transport.handle_request(request)
        except Exception as e:
            self._recorder.record(captured, started, error=e)
            raise

        if response.is_stream_consumed:
            body = decode_response_body(response, None)
        else:
            try:
                raw = b"".join(response.iter_raw())
            except Exception as e:
                self._recorder.record(captured, started, response=response, error=e)
                raise
            response = replay(response, request, raw)
            body = decode_response_body(response, raw)

        self._recorder.record(captured, started, response=response, response_body=body)
        return response

    def close(self) -> None:
        self._transport.close()


class AsyncLoggingTransport(httpx.AsyncBaseTransport):
    """Transport decorator for httpx.AsyncClient."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        writer: Optional[ApiLogWriter] = None,
    ):
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._recorder = _CallRecorder(writer)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        captured = self._recorder.capture(request)
        started = time.monotonic()

        try:
            response = await self._transport.handle_async_request(request)
        except Exception as e:
            self._recorder.record(captured, started, error=e)
            raise

        if response.is_stream_consumed:
            body = decode_response_body(response, None)
        else:
            try:
                raw = b"".join([chunk async for chunk in response.aiter_raw()])
            except Exception as e:
                self._recorder.record(captured, started, response=response, error=e)
                raise
            response = replay(response, request, raw)
            body = decode_response_body(response, raw)

        self._recorder.record(captured, started, response=response, response_body=body)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


def create_client(
    writer: Optional[ApiLogWriter] = None,
    transport: Optional[httpx.BaseTransport] = None,
    **kwargs,
) -> httpx.Client:
    """Create an httpx.Client whose every request is logged"""
    return httpx.Client(transport=LoggingTransport(transport, writer), **kwargs)


def create_async_client(
    writer: Optional[ApiLogWriter] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient whose every request is logged"""
    return httpx.AsyncClient(transport=AsyncLoggingTransport(transport, writer), **kwargs)


def enable_api_logging(writer: Optional[ApiLogWriter] = None):
    """
    Prepare the logs directory and report where entries will be written.

    Returns:
        Path: Today's log file
    """
    writer = writer or get_default_writer()
    log_path = writer.get_log_file_path()
    get_logger("apilogs.capture").info(
        f"API logging enabled. Logs will be written to: {log_path}"
    )
    return log_path
