# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import socket

import httpx
import pytest

from mailprobe.config import HttpSettings
from mailprobe.errors import ErrorCategory
from mailprobe.http.httpx_client import HttpxClient
from mailprobe.http.models import HttpRequest, HttpResponse
from mailprobe.models import ProbeRequest, ProbeResult
from mailprobe.probe import EndpointProbe, build_http_request, probe, to_probe_result


def _probe_with(handler) -> EndpointProbe:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return EndpointProbe(HttpxClient(HttpSettings(), client=client))


def test_probe_result_requires_status_or_error():
    with pytest.raises(ValueError):
        ProbeResult()
    with pytest.raises(ValueError):
        ProbeResult(status_code=200, error_message="both")
    assert ProbeResult(status_code=500).is_http_error is True
    assert ProbeResult(error_message="refused").transport_failed is True


def test_probe_to_unknown_host_reports_error_without_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    result = _probe_with(handler).probe(ProbeRequest("http://does-not-exist.invalid/api/email/test"))
    assert result.status_code is None
    assert result.error_message
    assert result.error_category == ErrorCategory.CONNECTION_ERROR


def test_probe_to_closed_port_is_a_transport_failure():
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    holder.bind(("127.0.0.1", 0))
    port = holder.getsockname()[1]
    try:
        result = probe(ProbeRequest(f"http://127.0.0.1:{port}/api/email/test", timeout=2.0))
    finally:
        holder.close()
    assert result.status_code is None
    assert result.error_category in {ErrorCategory.CONNECTION_ERROR, ErrorCategory.TIMEOUT}


def test_probe_timeout_is_distinct_from_connection_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = _probe_with(handler).probe(ProbeRequest("http://svc/slow", timeout=0.1))
    assert result.timed_out is True
    assert result.status_code is None


def test_probe_keeps_error_status_as_data():
    result = _probe_with(lambda request: httpx.Response(500, json={"success": False})).probe(ProbeRequest("http://svc/x"))
    assert result.status_code == 500
    assert result.json_body == {"success": False}
    assert result.error_message is None


def test_probe_encodes_json_bodies():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["content_type"] = request.headers.get("content-type")
        seen["body"] = json.loads(request.content)
        seen["method"] = request.method
        return httpx.Response(200, json={"success": True})

    result = _probe_with(handler).probe(ProbeRequest("http://svc/send", method="post", json={"candidateId": "navas"}))
    assert result.status_code == 200
    assert seen == {"content_type": "application/json", "body": {"candidateId": "navas"}, "method": "POST"}


def test_build_http_request_keeps_explicit_body_and_content_type():
    request = build_http_request(
        ProbeRequest("http://svc", method="POST", body="raw", json={"ignored": True}, headers={"content-type": "text/plain"})
    )
    assert request.body == "raw"
    assert request.headers == {"content-type": "text/plain"}


def test_malformed_json_is_reported_as_diagnostic():
    result = _probe_with(lambda request: httpx.Response(200, text="<html>oops</html>")).probe(
        ProbeRequest("http://svc/test", expect_json=True)
    )
    assert result.status_code == 200
    assert result.json_body is None
    assert result.diagnostic.startswith("Malformed response body")


def test_invalid_json_with_json_content_type_is_flagged():
    response = HttpResponse(ok=True, status_code=200, headers={"content-type": "application/json"}, text="{not json")
    result = to_probe_result(response)
    assert result.diagnostic.startswith("Malformed response body")


def test_client_exceptions_are_converted():
    class ExplodingClient:
        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            raise ConnectionResetError("reset by peer")

        def close(self) -> None:
            pass

    result = EndpointProbe(ExplodingClient()).probe(ProbeRequest("http://svc/x"))
    assert result.error_message == "reset by peer"
    assert result.error_category == ErrorCategory.CONNECTION_ERROR


def test_probe_issues_exactly_one_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    _probe_with(handler).probe(ProbeRequest("http://svc/x"))
    assert len(calls) == 1
