# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for CLI/library use."""

from __future__ import annotations

import logging
import os
import sys

DEFAULT_LOG_LEVEL = os.getenv("RESILIENT_TRANSPORT_LOG_LEVEL", "WARNING").upper()
DEFAULT_LOG_OUTPUT = os.getenv("RESILIENT_TRANSPORT_LOG_OUTPUT", "stderr").lower()


def setup_logging(level: str | None = None, output: str | None = None) -> None:
    """Configure standard logging; `output` is "stdout" or "stderr"."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    stream = sys.stdout if (output or DEFAULT_LOG_OUTPUT).lower() == "stdout" else sys.stderr
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream,
    )


__all__ = ["setup_logging"]
