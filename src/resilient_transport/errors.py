# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from .http.models import HttpResponse


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    HTTP_STATUS = "HTTP_STATUS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _root_cause(exc: BaseException) -> BaseException:
    seen: set[int] = set()
    current = exc
    while id(current) not in seen:
        seen.add(id(current))
        nxt = current.__cause__ or current.__context__
        if nxt is None:
            break
        current = nxt
    return current


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    root = _root_cause(exc)

    if isinstance(exc, httpx.TimeoutException) or isinstance(root, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(root, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)) or isinstance(root, ssl_module.SSLError):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, httpx.ProtocolError):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


class TransportError(Exception):
    """Base class for every error raised by the transport."""


class RequestConstructionError(TransportError, ValueError):
    """The request could not be built; nothing was sent."""


class InvalidURLError(RequestConstructionError):
    """The URL could not be parsed or is not an absolute http(s) URL."""


class TokenNotFoundError(TransportError, ValueError):
    """The URL path holds no non-empty segment."""


class NoValidatorError(TransportError):
    """A metadata probe succeeded but carried neither Last-Modified nor a strong ETag."""


class HttpRequestError(TransportError):
    """
    Terminal failure of a request after the retry loop gave up.

    Carries the final attempt's status code, raw body and error details so callers
    can diagnose without retrying blindly.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
        attempts: int = 1,
        error_type: str | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        response: HttpResponse | None = None,
        body_limit: int = 512,
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        self.attempts = attempts
        self.error_type = error_type
        self.category = category
        self.response = response
        shown = body if body_limit <= 0 or len(body) <= body_limit else body[:body_limit] + "...[truncated]"
        super().__init__(
            f"{message}, server response = {shown}, http status code = {status_code if status_code is not None else 0}"
            f", attempts = {attempts}"
        )

    @classmethod
    def from_response(cls, response: HttpResponse, *, body_limit: int = 512) -> HttpRequestError:
        """Wrap a failed final outcome with its diagnostic context."""
        category = response.meta.get("error_category")
        if not isinstance(category, ErrorCategory):
            category = ErrorCategory.HTTP_STATUS if response.status_code is not None else ErrorCategory.UNKNOWN_ERROR
        return cls(
            response.error_message or "HTTP request failed",
            status_code=response.status_code,
            body=response.content.decode("utf-8", errors="replace"),
            attempts=int(response.meta.get("attempts", 1)),
            error_type=response.error_type,
            category=category,
            response=response,
            body_limit=body_limit,
        )

    @property
    def retryable(self) -> bool:
        """False for client errors (4xx), True otherwise."""
        from .http.retry import should_retry

        return should_retry(self.status_code)


__all__ = [
    "ErrorCategory",
    "HttpRequestError",
    "InvalidURLError",
    "NoValidatorError",
    "RequestConstructionError",
    "TokenNotFoundError",
    "TransportError",
    "categorize_exception",
]
