# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fixed-delay retry loop for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from ..config import TransportSettings, load_transport_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryPolicy

logger = logging.getLogger(__name__)


def should_retry(status_code: int | None) -> bool:
    """
    Decide from the HTTP status whether a failed attempt is worth repeating.

    Client errors (4xx) will never be accepted as-is; everything else, including
    attempts that produced no status at all, is treated as transient.
    """
    if status_code is not None and 400 <= status_code < 500:
        return False
    return True


def build_default_retry_policy(settings: TransportSettings | None = None) -> RetryPolicy:
    """Create a RetryPolicy from environment-backed TransportSettings."""
    return RetryPolicy.from_settings(settings or load_transport_settings())


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    policy: RetryPolicy | None = None,
) -> HttpResponse:
    """
    Execute a request until it succeeds, fails permanently, or runs out of attempts.

    The returned response is always the outcome of the last attempt made; its
    `meta["attempts"]` records how many physical attempts were performed.
    """
    cfg = policy or build_default_retry_policy()

    attempt = 0
    while True:
        attempt += 1
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=exc.__class__.__name__,
                meta={"error_category": categorize_exception(exc)},
            )
        response.meta["attempts"] = attempt

        if attempt >= cfg.max_attempts:
            if not response.ok:
                response.meta["retry_exhausted"] = should_retry(response.status_code)
                logger.debug(
                    "HTTP request permanently rejected. Max attempts reached "
                    "(attempt=%d max_attempts=%d status=%s error=%s url=%s method=%s)",
                    attempt,
                    cfg.max_attempts,
                    response.status_code,
                    response.error_message,
                    request.url,
                    request.method,
                )
            return response

        if not response.ok and should_retry(response.status_code):
            logger.debug(
                "Retrying %s %s in %.2fs after attempt %d/%d failed (status=%s error=%s)",
                request.method,
                request.url,
                cfg.delay,
                attempt,
                cfg.max_attempts,
                response.status_code,
                response.error_message,
            )
            time.sleep(cfg.delay)
            continue

        return response


__all__ = ["build_default_retry_policy", "send_with_retries", "should_retry"]
