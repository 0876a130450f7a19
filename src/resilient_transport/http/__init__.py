# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubHttpClient
from .client import HttpClient, create_default_http_client
from .headers import header_value, normalize_etag, normalize_headers
from .httpx_client import HttpxClient
from .models import SUCCESS_STATUS_CODES, Head, Headers, HttpRequest, HttpResponse, RetryPolicy
from .retry import build_default_retry_policy, send_with_retries, should_retry
from .timestamps import parse_timestamp
from .transport import RetryingTransport, Transport
from .url import last_path_token, validate_url

__all__ = [
    "SUCCESS_STATUS_CODES",
    "Head",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RetryPolicy",
    "RetryingTransport",
    "StubHttpClient",
    "Transport",
    "build_default_retry_policy",
    "create_default_http_client",
    "header_value",
    "last_path_token",
    "normalize_etag",
    "normalize_headers",
    "parse_timestamp",
    "send_with_retries",
    "should_retry",
    "validate_url",
]
