# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Permissive timestamp parsing for Last-Modified style headers.

Servers are inconsistent about HTTP-date formatting, so we accept the RFC 822/850/1123
family, RFC 3339, ANSI C / Unix `date` / Ruby layouts and syslog-style stamps. The
accepted layouts are a fixed, ordered tuple; the first one that parses wins.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

logger = logging.getLogger(__name__)

# Ordered (name, strptime layout) pairs. Zone abbreviations are rewritten to numeric
# offsets before matching, so each "%z" layout also covers its named-zone variant.
TIMESTAMP_FORMATS: tuple[tuple[str, str], ...] = (
    ("RFC1123Z", "%a, %d %b %Y %H:%M:%S %z"),
    ("RFC1123", "%a, %d %b %Y %H:%M:%S"),
    ("RFC822Z", "%d %b %y %H:%M %z"),
    ("RFC822", "%d %b %y %H:%M"),
    ("RFC850", "%A, %d-%b-%y %H:%M:%S %z"),
    ("ANSIC", "%a %b %d %H:%M:%S %Y"),
    ("UnixDate/RubyDate", "%a %b %d %H:%M:%S %z %Y"),
    ("DateTime", "%Y-%m-%d %H:%M:%S"),
    ("DateTimeMinutes", "%Y-%m-%d %H:%M"),
    ("DateOnly", "%Y-%m-%d"),
)

# Stamp layouts carry no year; the current UTC year is prepended before parsing.
STAMP_FORMATS: tuple[tuple[str, str], ...] = (
    ("Stamp", "%Y %b %d %H:%M:%S"),
    ("StampMilli/Micro/Nano", "%Y %b %d %H:%M:%S.%f"),
)

# RFC 822 zone names; any other upper-case abbreviation is taken as UTC.
ZONE_OFFSETS: dict[str, str] = {
    "UT": "+0000",
    "UTC": "+0000",
    "GMT": "+0000",
    "Z": "+0000",
    "EST": "-0500",
    "EDT": "-0400",
    "CST": "-0600",
    "CDT": "-0500",
    "MST": "-0700",
    "MDT": "-0600",
    "PST": "-0800",
    "PDT": "-0700",
}

_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)
_FRACTION_RE = re.compile(r"\.(\d+)")
_ZONE_RE = re.compile(r"(?<![A-Za-z])([A-Z]{1,5})(?![A-Za-z])")
_STAMP_RE = re.compile(r"^[A-Z][a-z]{2}\s+\d{1,2}\s+\d{2}:\d{2}:\d{2}(?:\.\d+)?$")


def _fix_fraction(value: str) -> str:
    """Pad or truncate fractional seconds to the microsecond precision strptime supports."""
    return _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)


def _replace_zone_names(value: str) -> str:
    return _ZONE_RE.sub(lambda m: ZONE_OFFSETS.get(m.group(1), "+0000"), value)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_rfc3339(value: str) -> datetime | None:
    if not _RFC3339_RE.match(value):
        return None
    normalized = _fix_fraction(value)
    if normalized[-1] in "Zz":
        normalized = normalized[:-1] + "+00:00"
    normalized = normalized[:10] + "T" + normalized[11:]
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _parse_http_date(value: str) -> datetime | None:
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


def _parse_stamp(value: str, now: datetime | None) -> datetime | None:
    if not _STAMP_RE.match(value):
        return None
    year = (now or datetime.now(timezone.utc)).year
    candidate = f"{year} {_fix_fraction(value)}"
    for _name, layout in STAMP_FORMATS:
        try:
            return datetime.strptime(candidate, layout)
        except ValueError:
            continue
    return None


def parse_timestamp(value: str | None, *, now: datetime | None = None) -> datetime | None:
    """
    Parse `value` with the first matching known layout.

    Returns a timezone-aware datetime (zone-less inputs are taken as UTC), or None when
    the value is empty or matches no layout. `now` supplies the year for Stamp layouts.
    """
    raw = str(value or "").strip()
    if not raw:
        return None

    parsed = _parse_http_date(raw) or _parse_rfc3339(raw) or _parse_stamp(raw, now)
    if parsed is not None:
        return _as_aware(parsed)

    candidate = _fix_fraction(_replace_zone_names(raw))
    for _name, layout in TIMESTAMP_FORMATS:
        try:
            return _as_aware(datetime.strptime(candidate, layout))
        except ValueError:
            continue

    logger.debug("Unable to parse timestamp %r", raw)
    return None


__all__ = ["STAMP_FORMATS", "TIMESTAMP_FORMATS", "ZONE_OFFSETS", "parse_timestamp"]
