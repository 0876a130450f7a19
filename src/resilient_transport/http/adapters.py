# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Test doubles for the HttpClient protocol."""

from __future__ import annotations

from collections.abc import Iterable

from .client import HttpClient
from .models import HttpRequest, HttpResponse

StubOutcome = HttpResponse | BaseException


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient for tests.

    Each URL maps to a queue of outcomes replayed in order; the last one repeats once the
    queue is drained. An exception in the queue is raised instead of returned.
    """

    def __init__(self, responses: dict[str, StubOutcome | Iterable[StubOutcome]] | None = None):
        self._responses: dict[str, list[StubOutcome]] = {}
        self.requests: list[HttpRequest] = []
        self.closed = False
        for url, outcome in (responses or {}).items():
            self.add(url, outcome)

    def add(self, url: str, outcome: StubOutcome | Iterable[StubOutcome]) -> None:
        if isinstance(outcome, (HttpResponse, BaseException)):
            self._responses[url] = [outcome]
        else:
            self._responses[url] = list(outcome)

    def calls(self, url: str | None = None) -> int:
        """Number of recorded round trips, optionally for one URL."""
        if url is None:
            return len(self.requests)
        return sum(1 for request in self.requests if request.url == url)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        queue = self._responses.get(request.url)
        if not queue:
            return HttpResponse(ok=False, status_code=None, error_message="No stubbed response configured")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True
