# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
resilient_transport package entrypoint.

A small HTTP transport that retries transient failures with a fixed delay and derives
cache-validation metadata (ETag, Last-Modified) for conditional fetches. The network
client is abstracted behind an injectable protocol, and requests, responses and retry
policies are modeled with typed dataclasses.
"""

from .config import TransportSettings, load_transport_settings
from .errors import (
    ErrorCategory,
    HttpRequestError,
    InvalidURLError,
    NoValidatorError,
    RequestConstructionError,
    TokenNotFoundError,
    TransportError,
)
from .http import (
    Head,
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryingTransport,
    RetryPolicy,
    StubHttpClient,
    Transport,
    create_default_http_client,
    last_path_token,
    normalize_etag,
    parse_timestamp,
    send_with_retries,
)
from .log import setup_logging
from .version import __version__

__all__ = [
    "ErrorCategory",
    "Head",
    "HttpClient",
    "HttpRequest",
    "HttpRequestError",
    "HttpResponse",
    "HttpxClient",
    "InvalidURLError",
    "NoValidatorError",
    "RequestConstructionError",
    "RetryPolicy",
    "RetryingTransport",
    "StubHttpClient",
    "TokenNotFoundError",
    "Transport",
    "TransportError",
    "TransportSettings",
    "create_default_http_client",
    "last_path_token",
    "load_transport_settings",
    "normalize_etag",
    "parse_timestamp",
    "send_with_retries",
    "setup_logging",
    "__version__",
]
