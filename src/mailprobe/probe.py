# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-request endpoint probe."""

from __future__ import annotations

import json
import logging

from .errors import ErrorCategory, categorize_exception
from .http.client import HttpClient, create_default_http_client
from .http.headers import header_value, is_json_content_type
from .http.models import HttpRequest, HttpResponse
from .models.probe import ProbeRequest, ProbeResult

logger = logging.getLogger(__name__)


def build_http_request(request: ProbeRequest) -> HttpRequest:
    """Translate a ProbeRequest into the client-level request, encoding `json` if given."""
    headers = dict(request.headers or {})
    body = request.body
    if body is None and request.json is not None:
        body = json.dumps(request.json)
        if not header_value(headers, "content-type"):
            headers["Content-Type"] = "application/json"
    return HttpRequest(
        url=request.url,
        method=request.method.upper(),
        headers=headers,
        body=body,
        timeout=request.timeout,
    )


def _parse_body(response: HttpResponse, expect_json: bool) -> tuple[object, str | None]:
    wants_json = expect_json or is_json_content_type(response.headers)
    if not wants_json:
        return None, None
    if not response.text.strip():
        return None, "Malformed response body: expected JSON, got an empty body" if expect_json else None
    try:
        return json.loads(response.text), None
    except ValueError as exc:
        return None, f"Malformed response body: {exc}"


def to_probe_result(response: HttpResponse, *, expect_json: bool = False) -> ProbeResult:
    """Convert a client response into a ProbeResult without raising."""
    if response.status_code is None:
        category = response.error_category
        if category == ErrorCategory.NONE:
            category = ErrorCategory.UNKNOWN_ERROR
        return ProbeResult(
            error_message=response.error_message or "Transport failure with no error message",
            error_category=category,
            elapsed=response.elapsed,
        )

    json_body, diagnostic = _parse_body(response, expect_json)
    if response.meta.get("body_truncated"):
        note = f"Body truncated after {response.meta.get('body_bytes_read')} bytes"
        diagnostic = f"{diagnostic}; {note}" if diagnostic else note
    return ProbeResult(
        status_code=response.status_code,
        body_text=response.text,
        headers=dict(response.headers),
        json_body=json_body,
        diagnostic=diagnostic,
        elapsed=response.elapsed,
    )


class EndpointProbe:
    """Issues exactly one HTTP request per call and captures the outcome as data."""

    def __init__(self, http_client: HttpClient | None = None):
        self.http_client = http_client or create_default_http_client()

    def probe(self, request: ProbeRequest) -> ProbeResult:
        http_request = build_http_request(request)
        try:
            response = self.http_client.request(http_request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                url=http_request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                error_category=categorize_exception(exc),
            )
        result = to_probe_result(response, expect_json=request.expect_json)
        if result.transport_failed:
            logger.info("%s %s -> %s: %s", http_request.method, http_request.url, result.error_category.value, result.error_message)
        else:
            logger.info("%s %s -> %s", http_request.method, http_request.url, result.status_code)
        return result

    def close(self) -> None:
        if hasattr(self.http_client, "close"):
            self.http_client.close()


def probe(request: ProbeRequest, http_client: HttpClient | None = None) -> ProbeResult:
    """Run a single probe with a throwaway client unless one is supplied."""
    owns_client = http_client is None
    endpoint_probe = EndpointProbe(http_client)
    try:
        return endpoint_probe.probe(request)
    finally:
        if owns_client:
            endpoint_probe.close()


__all__ = ["EndpointProbe", "build_http_request", "probe", "to_probe_result"]
