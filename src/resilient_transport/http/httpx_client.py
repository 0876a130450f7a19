# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import TransportSettings, load_transport_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import SUCCESS_STATUS_CODES, HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


def build_httpx_client(settings: TransportSettings) -> httpx.Client:
    """Create the pooled httpx.Client shared by every request of one HttpxClient."""
    return httpx.Client(
        follow_redirects=settings.allow_redirects,
        timeout=settings.timeout,
        verify=settings.verify_ssl,
        limits=httpx.Limits(max_keepalive_connections=settings.max_idle_connections),
    )


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper; one call to `request` is one physical attempt."""

    def __init__(self, settings: TransportSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_transport_settings()
        self._client = client or build_httpx_client(self.settings)

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            ) as resp:
                content = b""
                body_error: str | None = None
                try:
                    content = resp.read()
                except (httpx.HTTPError, httpx.StreamError) as exc:
                    body_error = str(exc) or type(exc).__name__
                    logger.warning("Unable to read body data from %s %s: %s", request.method, request.url, body_error)

                encoding = resp.encoding or "utf-8"
                try:
                    text = content.decode(encoding, errors="replace")
                except LookupError:
                    text = content.decode("utf-8", errors="replace")

            status = resp.status_code
            ok = status in SUCCESS_STATUS_CODES
            meta: dict[str, object] = {}
            if body_error is not None:
                meta["body_read_error"] = body_error
            return HttpResponse(
                ok=ok,
                status_code=status,
                headers=dict(resp.headers),
                text=text,
                content=content,
                url=str(resp.url),
                error_message=None if ok else f"HTTP request failed. HTTP status code returned = {status}",
                error_type=None if ok else "HTTPStatusError",
                meta=meta,
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                meta={"error_category": categorize_exception(exc)},
            )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
