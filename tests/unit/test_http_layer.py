# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import time

import httpx
import pytest

from resilient_transport.config import TransportSettings
from resilient_transport.errors import ErrorCategory
from resilient_transport.http.httpx_client import HttpxClient
from resilient_transport.http.models import HttpRequest, HttpResponse, RetryPolicy
from resilient_transport.http.retry import build_default_retry_policy, send_with_retries, should_retry


class SequenceHttpClient:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        self.calls += 1
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:  # pragma: no cover - not needed by the retry loop
        self.closed = True


def _status(code: int, body: bytes = b"") -> HttpResponse:
    ok = code in (200, 201, 204)
    return HttpResponse(
        ok=ok,
        status_code=code,
        content=body,
        text=body.decode(),
        error_message=None if ok else f"HTTP request failed. HTTP status code returned = {code}",
    )


@pytest.fixture
def sleeps(monkeypatch):
    recorded: list[float] = []
    monkeypatch.setattr(time, "sleep", recorded.append)
    return recorded


@pytest.mark.parametrize("code", [400, 401, 404, 409, 499])
def test_client_errors_are_attempted_once(sleeps, code):
    client = SequenceHttpClient([_status(code)])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=5, delay=1.0))
    assert result.ok is False
    assert result.status_code == code
    assert client.calls == 1
    assert sleeps == []
    assert result.meta["attempts"] == 1


def test_server_errors_retry_until_success(sleeps):
    client = SequenceHttpClient([_status(500), _status(502), _status(200, b"done")])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=5, delay=0.25))
    assert result.ok is True
    assert result.content == b"done"
    assert client.calls == 3
    assert sleeps == [0.25, 0.25]
    assert result.meta["attempts"] == 3


def test_permanent_server_failure_exhausts_attempts(sleeps):
    client = SequenceHttpClient([_status(503, b"down")])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=4, delay=0.5))
    assert result.ok is False
    assert result.status_code == 503
    assert client.calls == 4
    assert sleeps == [0.5, 0.5, 0.5]
    assert result.meta["retry_exhausted"] is True


def test_single_attempt_policy_never_sleeps(sleeps):
    client = SequenceHttpClient([HttpResponse(ok=False, error_message="timeout"), _status(200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=1, delay=3.0))
    assert result.ok is False
    assert result.error_message == "timeout"
    assert client.calls == 1
    assert sleeps == []


def test_redirect_and_informational_statuses_are_retried(sleeps):
    client = SequenceHttpClient([_status(302), _status(100), _status(201, b"made")])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=3, delay=0))
    assert result.ok is True
    assert result.status_code == 201
    assert client.calls == 3
    assert sleeps == [0, 0]


def test_network_errors_without_status_are_retried(sleeps):
    client = SequenceHttpClient([HttpResponse(ok=False, error_message="connection reset"), _status(204)])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=2, delay=0.1))
    assert result.ok is True
    assert client.calls == 2
    assert sleeps == [0.1]


def test_last_attempt_outcome_wins(sleeps):
    client = SequenceHttpClient([_status(500, b"first"), HttpResponse(ok=False, error_message="timed out")])
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=2, delay=0))
    assert result.status_code is None
    assert result.error_message == "timed out"


def test_send_with_retries_converts_exceptions(sleeps):
    class ExceptionThenSuccess:
        def __init__(self):
            self.calls = 0

        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            self.calls += 1
            if self.calls == 1:
                raise httpx.ConnectTimeout("boom")
            return _status(200, b"ok")

    client = ExceptionThenSuccess()
    result = send_with_retries(client, HttpRequest(url="http://example"), policy=RetryPolicy(max_attempts=3, delay=0))
    assert result.ok is True
    assert client.calls == 2
    assert result.meta["attempts"] == 2


def test_exhaustion_is_logged_at_debug(sleeps, caplog):
    client = SequenceHttpClient([_status(500)])
    with caplog.at_level(logging.DEBUG, logger="resilient_transport.http.retry"):
        send_with_retries(client, HttpRequest(url="http://example/x"), policy=RetryPolicy(max_attempts=2, delay=0))
    assert "Max attempts reached" in caplog.text
    assert "http://example/x" in caplog.text


def test_should_retry_classification():
    assert should_retry(None) is True
    assert should_retry(500) is True
    assert should_retry(301) is True
    assert should_retry(400) is False
    assert should_retry(499) is False


def test_build_default_retry_policy_uses_settings():
    policy = build_default_retry_policy(TransportSettings(max_attempts=0, retry_delay=-1.0))
    assert policy.max_attempts == 1
    assert policy.delay == 0.0


def test_retry_policy_validation_and_round_trip():
    policy = RetryPolicy(max_attempts=7, delay=2.5)
    restored = RetryPolicy.from_dict(policy.to_dict())
    assert restored == policy
    assert restored.max_attempts == 7
    assert restored.delay == 2.5
    assert RetryPolicy.default() == RetryPolicy(max_attempts=3, delay=15.0)

    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(delay=-1)


def _httpx_client(handler, settings: TransportSettings | None = None) -> HttpxClient:
    return HttpxClient(settings or TransportSettings(user_agent="UA/1.0"), client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_httpx_client_success_sets_defaults():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, headers={"ETag": '"v1"'}, content=b"created")

    client = _httpx_client(handler)
    resp = client.request(HttpRequest(url="http://example/path", method="POST", headers={"X": "1"}, body=b"payload"))
    assert resp.ok is True
    assert resp.status_code == 201
    assert resp.content == b"created"
    assert resp.text == "created"
    assert resp.header("etag") == '"v1"'
    assert seen[0].method == "POST"
    assert seen[0].headers["User-Agent"] == "UA/1.0"
    assert seen[0].headers["X"] == "1"
    assert seen[0].content == b"payload"


def test_httpx_client_flags_non_success_status():
    client = _httpx_client(lambda request: httpx.Response(500, content=b"oops"))
    resp = client.request(HttpRequest(url="http://example"))
    assert resp.ok is False
    assert resp.status_code == 500
    assert resp.content == b"oops"
    assert "500" in (resp.error_message or "")


def test_httpx_client_converts_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("boom", request=request)

    resp = _httpx_client(handler).request(HttpRequest(url="http://example"))
    assert resp.ok is False
    assert resp.status_code is None
    assert resp.error_message == "boom"
    assert resp.error_type == "ConnectTimeout"
    assert resp.meta["error_category"] is ErrorCategory.TIMEOUT


def test_httpx_client_body_read_failure_keeps_status(caplog):
    class FailingStream(httpx.SyncByteStream):
        def __iter__(self):
            raise httpx.ReadError("connection reset")
            yield b""  # pragma: no cover

    client = _httpx_client(lambda request: httpx.Response(200, stream=FailingStream()))
    with caplog.at_level(logging.WARNING, logger="resilient_transport.http.httpx_client"):
        resp = client.request(HttpRequest(url="http://example"))
    assert resp.ok is True
    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.meta["body_read_error"] == "connection reset"
    assert "Unable to read body data" in caplog.text


def test_httpx_client_close_closes_pool():
    inner = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    with HttpxClient(TransportSettings(), client=inner):
        pass
    assert inner.is_closed is True
