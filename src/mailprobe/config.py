# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration for the probe client and the verification service."""

import os
from dataclasses import dataclass, field

from .version import __version__

DEFAULT_USER_AGENT = f"mailprobe/{__version__} (email endpoint verification)"
DEFAULT_PORT = 3333
DEFAULT_MOUNT_PREFIX = "/api/email"
DEFAULT_ALLOWED_ORIGINS = frozenset({"http://localhost:3000", "http://localhost:3001"})
DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_FROM_EMAIL = "onboarding@resend.dev"


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


def _set_env(name: str, default: frozenset[str]) -> frozenset[str]:
    value = os.getenv(name)
    if value is None:
        return default
    return frozenset(item.strip() for item in value.split(",") if item.strip())


@dataclass
class HttpSettings:
    """Probe client defaults."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 4 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("MAILPROBE_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_body_bytes = _int_env("MAILPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=timeout,
            user_agent=os.getenv("MAILPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("MAILPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("MAILPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class ServiceConfig:
    """
    Settings for the verification service.

    Passed explicitly to the bootstrap; nothing in `mailprobe.server` reads the
    environment on its own. Use `from_env()` at the process edge.
    """

    port: int = DEFAULT_PORT
    allowed_origins: frozenset[str] = DEFAULT_ALLOWED_ORIGINS
    mount_prefix: str = DEFAULT_MOUNT_PREFIX
    host: str = "127.0.0.1"

    def __post_init__(self) -> None:
        self.allowed_origins = frozenset(self.allowed_origins)

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        return cls(
            port=_int_env("MAILPROBE_PORT", DEFAULT_PORT),
            allowed_origins=_set_env("MAILPROBE_ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS),
            mount_prefix=os.getenv("MAILPROBE_MOUNT_PREFIX", DEFAULT_MOUNT_PREFIX),
            host=os.getenv("MAILPROBE_HOST", "127.0.0.1"),
        )


@dataclass
class EmailSettings:
    """Settings for the email collaborators behind the service."""

    frontend_url: str = DEFAULT_FRONTEND_URL
    from_email: str = DEFAULT_FROM_EMAIL
    resend_api_key: str | None = field(default=None, repr=False)

    @property
    def provider_configured(self) -> bool:
        return bool(self.resend_api_key)

    @classmethod
    def from_env(cls) -> "EmailSettings":
        return cls(
            frontend_url=os.getenv("MAILPROBE_FRONTEND_URL", DEFAULT_FRONTEND_URL),
            from_email=os.getenv("MAILPROBE_FROM_EMAIL", DEFAULT_FROM_EMAIL),
            resend_api_key=os.getenv("RESEND_API_KEY") or None,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_service_config() -> ServiceConfig:
    return ServiceConfig.from_env()


def load_email_settings() -> EmailSettings:
    return EmailSettings.from_env()
