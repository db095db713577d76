"""
Decorator that logs calls made outside the logging transports.

with_api_logging(service) wraps a coroutine function (or a plain one) and
writes one log entry per invocation, built from whatever request-shaped
argument and response-shaped result the call involves.
"""

import functools
import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol, runtime_checkable

import httpx

from apilogs.logging import get_logger
from .models import LogEntry
from .transport import parse_body_text, read_request_body
from .writer import ApiLogWriter, get_default_writer


@runtime_checkable
class RequestLike(Protocol):
    url: Any
    method: Any


@runtime_checkable
class ResponseCarrier(Protocol):
    response: Any


@dataclass
class RequestDetails:
    url: Optional[str] = None
    method: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    body: Any = None


@dataclass
class ResponseDetails:
    status: Optional[int] = None
    headers: Optional[Dict[str, str]] = None
    body: Any = None


def _as_headers(value: Any) -> Optional[Dict[str, str]]:
    if isinstance(value, (Mapping, httpx.Headers)):
        return dict(value)
    return None


def _is_status(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def as_request_details(value: Any) -> Optional[RequestDetails]:
    """
    Describe a value that satisfies the request shape, or return None.

    Accepted shapes: httpx.Request, a mapping with "url" and "method"
    keys, or an object with url and method attributes.
    """
    if isinstance(value, httpx.Request):
        body = read_request_body(value)
        return RequestDetails(str(value.url), value.method, dict(value.headers), body)

    if isinstance(value, Mapping):
        if value.get("url") and value.get("method"):
            return RequestDetails(
                str(value["url"]),
                str(value["method"]),
                _as_headers(value.get("headers")),
                value.get("body"),
            )
        return None

    if isinstance(value, httpx.Response):
        # Response.url proxies to its request and may raise when there is none
        return None

    if isinstance(value, RequestLike) and value.url and value.method:
        return RequestDetails(
            str(value.url),
            str(value.method),
            _as_headers(getattr(value, "headers", None)),
            getattr(value, "body", None),
        )

    return None


def _buffered_body(response: httpx.Response) -> Any:
    if not response.is_stream_consumed:
        return None
    try:
        return parse_body_text(response.text)
    except (httpx.StreamError, ValueError):
        return None


def as_response_details(value: Any) -> Optional[ResponseDetails]:
    """
    Describe a value that satisfies the response shape, or return None.

    Accepted shapes: httpx.Response, an object carrying an httpx.Response
    in its response attribute, or a mapping/object with a numeric status
    (or status_code) whose body is taken from data or body.
    """
    if value is None:
        return None

    if isinstance(value, httpx.Response):
        return ResponseDetails(value.status_code, dict(value.headers), _buffered_body(value))

    if isinstance(value, ResponseCarrier) and isinstance(value.response, httpx.Response):
        inner = value.response
        return ResponseDetails(inner.status_code, dict(inner.headers), getattr(value, "body", None))

    if isinstance(value, Mapping):
        fields = value
    else:
        fields = {
            name: getattr(value, name)
            for name in ("status", "status_code", "data", "body")
            if hasattr(value, name)
        }

    status = fields.get("status", fields.get("status_code"))
    if _is_status(status):
        body = fields.get("data") or fields.get("body")
        return ResponseDetails(status, _as_headers(fields.get("headers")), body)

    return None


def _is_async_callable(fn: Callable) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None)
    )


def find_request_details(args: Iterable[Any]) -> Optional[RequestDetails]:
    for arg in args:
        details = as_request_details(arg)
        if details is not None:
            return details
    return None


def with_api_logging(service: str, writer: Optional[ApiLogWriter] = None) -> Callable:
    """
    Decorate a function so each call is logged under a service label.

    The wrapped function keeps its signature, return value and exceptions.
    Exactly one entry is written per call, on success and on failure.

    Args:
        service: Service label for the entries
        writer: Log writer, defaults to the project's writer
    """

    def decorator(fn: Callable) -> Callable:

        def record(args, kwargs, started, result, error):
            try:
                request = find_request_details(list(args) + list(kwargs.values()))
                response = as_response_details(result)
                entry = LogEntry(
                    url=(request and request.url) or "unknown",
                    method=(request and request.method) or "unknown",
                    service=service,
                    headers=request.headers if request else None,
                    body=request.body if request else None,
                    response_headers=response.headers if response else None,
                    response_body=(response.body or None) if response else None,
                    status_code=response.status if response else None,
                    error=error,
                    duration_ms=int((time.monotonic() - started) * 1000),
                )
            except Exception as e:
                get_logger("apilogs.capture.wrapper").error(
                    f"Could not build API log entry for {getattr(fn, '__qualname__', fn)}: {e}"
                )
                return
            (writer or get_default_writer()).append(entry)

        async def settle(awaitable, args, kwargs, started):
            result = None
            error = None
            try:
                result = await awaitable
                return result
            except BaseException as e:
                error = e
                raise
            finally:
                record(args, kwargs, started, result, error)

        if _is_async_callable(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args, **kwargs):
                started = time.monotonic()
                try:
                    awaitable = fn(*args, **kwargs)
                except BaseException as e:
                    record(args, kwargs, started, None, e)
                    raise
                return await settle(awaitable, args, kwargs, started)

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            started = time.monotonic()
            try:
                result = fn(*args, **kwargs)
            except BaseException as e:
                record(args, kwargs, started, None, e)
                raise
            # The call is only finished once a returned awaitable settles
            if inspect.isawaitable(result):
                return settle(result, args, kwargs, started)
            record(args, kwargs, started, result, None)
            return result

        return wrapper

    return decorator
