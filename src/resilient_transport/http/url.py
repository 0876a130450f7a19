# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers: request-target validation and path token extraction."""

from __future__ import annotations

from urllib.parse import urlsplit

import httpx

from ..errors import InvalidURLError, TokenNotFoundError

ALLOWED_SCHEMES = frozenset({"http", "https"})


def validate_url(url: str) -> str:
    """
    Return `url` unchanged if it is an absolute http(s) URL with a host.

    Raises InvalidURLError otherwise, so malformed targets fail before any attempt.
    """
    raw = str(url or "").strip()
    if not raw:
        raise InvalidURLError("URL is empty")
    try:
        parsed = httpx.URL(raw)
    except (httpx.InvalidURL, ValueError, TypeError) as exc:
        raise InvalidURLError(f"Unable to parse URL {raw!r}: {exc}") from exc
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"Unsupported URL scheme in {raw!r}; expected http or https")
    if not parsed.host:
        raise InvalidURLError(f"URL {raw!r} has no host")
    return raw


def last_path_token(url: str) -> str:
    """
    Return the last non-empty path segment of `url`.

    Example:
      http://www.gizmag.com/lacie-12-big-thunderbolt-hard-drive/42878/ -> 42878
    """
    try:
        parsed = urlsplit(str(url))
    except ValueError as exc:
        raise InvalidURLError(f"Unable to parse URL {url!r}: {exc}") from exc

    for segment in reversed(parsed.path.split("/")):
        if segment:
            return segment

    raise TokenNotFoundError(f"Unable to find a token in URL {url!r}")


__all__ = ["ALLOWED_SCHEMES", "last_path_token", "validate_url"]
