# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for the transport."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"resilient-transport/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class TransportSettings:
    """HTTP transport defaults."""

    timeout: float = 15.0
    max_attempts: int = 3
    retry_delay: float = 15.0
    max_idle_connections: int = 5
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    error_body_limit: int = 512

    @classmethod
    def from_env(cls) -> "TransportSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_idle = _int_env("RESILIENT_TRANSPORT_MAX_IDLE_CONNECTIONS", cls.max_idle_connections)
        if max_idle < 0:
            max_idle = cls.max_idle_connections
        return cls(
            timeout=_float_env("RESILIENT_TRANSPORT_TIMEOUT", cls.timeout),
            max_attempts=_int_env("RESILIENT_TRANSPORT_MAX_ATTEMPTS", cls.max_attempts),
            retry_delay=_float_env("RESILIENT_TRANSPORT_RETRY_DELAY", cls.retry_delay),
            max_idle_connections=max_idle,
            user_agent=os.getenv("RESILIENT_TRANSPORT_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RESILIENT_TRANSPORT_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RESILIENT_TRANSPORT_VERIFY_SSL", cls.verify_ssl),
            error_body_limit=_int_env("RESILIENT_TRANSPORT_ERROR_BODY_LIMIT", cls.error_body_limit),
        )


def load_transport_settings() -> TransportSettings:
    """Load transport settings from environment with sensible defaults."""
    return TransportSettings.from_env()
