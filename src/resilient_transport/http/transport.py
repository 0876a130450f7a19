# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retrying transport: round trips, body fetches and cache-validation probes."""

from __future__ import annotations

from contextlib import suppress
from typing import Protocol

from ..config import TransportSettings, load_transport_settings
from ..errors import HttpRequestError, NoValidatorError
from .client import HttpClient, create_default_http_client
from .headers import normalize_etag
from .models import Head, HttpRequest, HttpResponse, RetryPolicy
from .retry import send_with_retries
from .timestamps import parse_timestamp
from .url import validate_url


class Transport(Protocol):
    """Capability set exposed to callers such as API client wrappers."""

    def do(self, request: HttpRequest, policy: RetryPolicy | None = None) -> HttpResponse: ...

    def get(self, url: str) -> bytes: ...

    def head(self, url: str) -> Head: ...

    def close(self) -> None: ...


class RetryingTransport(Transport):
    """
    Transport that runs every request through the fixed-delay retry loop.

    The underlying HttpClient is injected at construction time; when omitted, an
    httpx-backed client with a capped keep-alive pool is created from settings.
    """

    def __init__(
        self,
        client: HttpClient | None = None,
        *,
        settings: TransportSettings | None = None,
        policy: RetryPolicy | None = None,
    ):
        self.settings = settings or load_transport_settings()
        self.default_policy = policy or RetryPolicy.from_settings(self.settings)
        self._client = client or create_default_http_client(self.settings)

    def do(self, request: HttpRequest, policy: RetryPolicy | None = None) -> HttpResponse:
        """Execute `request`; raise HttpRequestError if the final attempt failed."""
        validate_url(request.url)
        response = send_with_retries(self._client, request, policy=policy or self.default_policy)
        if not response.ok:
            raise HttpRequestError.from_response(response, body_limit=self.settings.error_body_limit)
        return response

    def get(self, url: str) -> bytes:
        """Fetch `url` and return the response body."""
        request = HttpRequest.build(url, method="GET")
        return self.do(request, self.default_policy).content

    def head(self, url: str) -> Head:
        """
        Probe `url` with HEAD and return its normalized cache validators.

        An unparsable Last-Modified is treated as absent; a weak ETag is discarded.
        Raises NoValidatorError when neither validator remains.
        """
        request = HttpRequest.build(url, method="HEAD")
        response = self.do(request, self.default_policy)

        head = Head(
            last_modified=parse_timestamp(response.header("Last-Modified")),
            etag=normalize_etag(response.header("ETag")),
        )
        if not head.has_validator:
            raise NoValidatorError(f"Neither Last-Modified nor a strong ETag header found for {url}")
        return head

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self._client, "close"):
                self._client.close()

    def __enter__(self) -> RetryingTransport:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["RetryingTransport", "Transport"]
