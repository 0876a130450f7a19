# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""resilient-transport diagnostic CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import TransportSettings, load_transport_settings
from ..errors import TransportError
from ..http import RetryingTransport, RetryPolicy, create_default_http_client, last_path_token
from ..log import setup_logging

CLI_TEXT_TRUNCATION_BYTES = 4096


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch URLs with fixed-delay retries and probe cache validators")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of plain text")
    parser.add_argument("--attempts", type=int, default=None, help="Maximum attempts per request")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait between attempts")
    parser.add_argument("--timeout", type=float, default=None, help="Per-attempt timeout in seconds")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from RESILIENT_TRANSPORT_LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command", required=True)
    get_parser = sub.add_parser("get", help="Fetch a URL and print its body")
    get_parser.add_argument("url")
    head_parser = sub.add_parser("head", help="Print the ETag / Last-Modified validators of a URL")
    head_parser.add_argument("url")
    token_parser = sub.add_parser("token", help="Print the last non-empty path segment of a URL")
    token_parser.add_argument("url")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _emit(payload: dict[str, Any], as_json: bool, plain: str) -> None:
    if as_json:
        json.dump(payload, sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        print(plain)


def _build_settings(args: argparse.Namespace) -> TransportSettings:
    settings = load_transport_settings()
    if args.attempts is not None:
        settings.max_attempts = args.attempts
    if args.delay is not None:
        settings.retry_delay = args.delay
    if args.timeout is not None:
        settings.timeout = args.timeout
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    return settings


def _run(args: argparse.Namespace) -> None:
    if args.command == "token":
        token = last_path_token(args.url)
        _emit({"url": args.url, "token": token}, args.json, token)
        return

    settings = _build_settings(args)
    policy = RetryPolicy.from_settings(settings)
    with RetryingTransport(create_default_http_client(settings), settings=settings, policy=policy) as transport:
        if args.command == "get":
            body = transport.get(args.url).decode("utf-8", errors="replace")
            text = _truncate_text_bytes(body, CLI_TEXT_TRUNCATION_BYTES)
            _emit({"url": args.url, "body": text}, args.json, text)
        else:
            head = transport.head(args.url)
            last_modified = head.last_modified.isoformat() if head.last_modified else "-"
            _emit(
                {"url": args.url, **head.to_dict()},
                args.json,
                f"ETag: {head.etag or '-'}\nLast-Modified: {last_modified}",
            )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        _run(args)
    except (TransportError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
