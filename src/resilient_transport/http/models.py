# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the transport."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any

from ..config import TransportSettings
from ..errors import RequestConstructionError
from .headers import header_value
from .url import validate_url

Headers = dict[str, str]

SUCCESS_STATUS_CODES = frozenset({200, 201, 204})


@dataclass(frozen=True)
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None

    @classmethod
    def build(
        cls,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
        timeout: float | None = None,
    ) -> HttpRequest:
        """Validate inputs and build a request; raises RequestConstructionError on bad input."""
        method = str(method or "").strip().upper()
        if not method or not method.isalpha():
            raise RequestConstructionError(f"Invalid HTTP method: {method!r}")
        if timeout is not None and timeout <= 0:
            raise RequestConstructionError(f"Timeout must be positive, got {timeout!r}")
        return cls(
            url=validate_url(url),
            method=method,
            headers=dict(headers) if headers else None,
            body=body,
            timeout=timeout,
        )


@dataclass
class HttpResponse:
    """Outcome of one physical round trip."""

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return header_value(self.headers, name, default)

    @property
    def attempts(self) -> int:
        return int(self.meta.get("attempts", 1))


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry policy: up to `max_attempts` tries, `delay` seconds apart."""

    max_attempts: int = 3
    delay: float = 15.0

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValueError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    @classmethod
    def default(cls) -> RetryPolicy:
        return cls()

    @classmethod
    def from_settings(cls, settings: TransportSettings) -> RetryPolicy:
        """Build a retry policy from the shared TransportSettings."""
        return cls(
            max_attempts=max(1, int(settings.max_attempts)),
            delay=max(0.0, float(settings.retry_delay)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"max_attempts": self.max_attempts, "delay": self.delay}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RetryPolicy:
        return cls(
            max_attempts=int(data.get("max_attempts", cls.max_attempts)),
            delay=float(data.get("delay", cls.delay)),
        )


@dataclass(frozen=True)
class Head:
    """
    Cache-validation metadata returned by a metadata probe.

    `last_modified` is None when the header was missing or unparsable; `etag` is the
    normalized strong ETag, or "" when missing or weak.
    """

    last_modified: datetime | None = None
    etag: str = ""

    @property
    def has_validator(self) -> bool:
        return self.last_modified is not None or bool(self.etag)

    def conditional_headers(self) -> Headers:
        """Request headers for a conditional re-fetch of the same resource."""
        headers: Headers = {}
        if self.etag:
            headers["If-None-Match"] = f'"{self.etag}"'
        if self.last_modified is not None:
            headers["If-Modified-Since"] = format_datetime(self.last_modified.astimezone(timezone.utc), usegmt=True)
        return headers

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "etag": self.etag,
        }
