# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request/result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import ErrorCategory


@dataclass
class ProbeRequest:
    """
    A single outbound request issued for verification.

    `json` is serialized into the body with a JSON content type when `body` is unset.
    `expect_json` asks the probe to flag bodies that do not parse as JSON.
    """

    url: str
    method: str = "GET"
    headers: dict[str, str] | None = None
    body: str | bytes | None = None
    json: Any = None
    timeout: float | None = None
    expect_json: bool = False


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of one probe.

    Either the server answered (`status_code` + `body_text`) or the transport failed
    (`error_message`, with `error_category` telling timeouts from connection
    failures). Any other combination is rejected at construction time.
    """

    status_code: int | None = None
    body_text: str = ""
    error_message: str | None = None
    error_category: ErrorCategory = ErrorCategory.NONE
    headers: dict[str, str] = field(default_factory=dict)
    json_body: Any = None
    diagnostic: str | None = None
    elapsed: float | None = None

    def __post_init__(self) -> None:
        if self.status_code is None and not self.error_message:
            raise ValueError("ProbeResult needs a status code or an error message")
        if self.status_code is not None and self.error_message:
            raise ValueError("ProbeResult cannot carry both a status code and a transport error")

    @property
    def transport_failed(self) -> bool:
        return self.status_code is None

    @property
    def timed_out(self) -> bool:
        return self.error_category == ErrorCategory.TIMEOUT

    @property
    def is_http_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 400

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "body_text": self.body_text,
            "error_message": self.error_message,
            "error_category": self.error_category.value,
            "json_body": self.json_body,
            "diagnostic": self.diagnostic,
            "elapsed": self.elapsed,
        }
