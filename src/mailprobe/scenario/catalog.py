# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Built-in scenarios for the candidate-session email API."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import quote

from ..config import DEFAULT_MOUNT_PREFIX
from ..http.url import join_url
from ..models import ProbeRequest, Scenario

DEFAULT_CANDIDATE_ID = "navas"
UNKNOWN_CANDIDATE_ID = "unknown-candidate"
SEND_PATH = "/send-candidate-session"

ScenarioFactory = Callable[..., Scenario]


def _endpoint(base_url: str, mount_prefix: str, path: str) -> str:
    return join_url(base_url, join_url(mount_prefix, path))


def email_api_scenario(
    base_url: str,
    *,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    candidate_id: str = DEFAULT_CANDIDATE_ID,
) -> Scenario:
    """Liveness check, then a minimal send request."""
    scenario = Scenario("email-api", description="Check the email routes are reachable, then send one invite")
    scenario.add(
        "Email routes test endpoint",
        ProbeRequest(_endpoint(base_url, mount_prefix, "/test"), expect_json=True),
        {200},
    )
    scenario.add(
        f"Send candidate session email ({candidate_id})",
        ProbeRequest(
            _endpoint(base_url, mount_prefix, SEND_PATH),
            method="POST",
            json={"candidateId": candidate_id},
            expect_json=True,
        ),
        {200},
    )
    return scenario


def method_guard_scenario(
    base_url: str,
    *,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    candidate_id: str = DEFAULT_CANDIDATE_ID,
    recruiter_email: str = "recruiter@example.com",
    unknown_candidate_id: str = UNKNOWN_CANDIDATE_ID,
) -> Scenario:
    """GET on the send route must be refused; POST with a full body must be served; bad ids are rejected."""
    url = _endpoint(base_url, mount_prefix, SEND_PATH)
    scenario = Scenario("method-guard", description="The send route only accepts POST")
    scenario.add("GET on send route is rejected", ProbeRequest(url, expect_json=True), {405})
    scenario.add(
        "POST with candidate, recruiter and message",
        ProbeRequest(
            url,
            method="POST",
            json={
                "candidateId": candidate_id,
                "recruiterEmail": recruiter_email,
                "message": "Test interview session",
            },
            expect_json=True,
        ),
        {200},
    )
    scenario.add(
        "POST without candidateId is rejected",
        ProbeRequest(url, method="POST", json={}, expect_json=True),
        {400},
    )
    scenario.add(
        f"POST for unknown candidate ({unknown_candidate_id}) is not found",
        ProbeRequest(url, method="POST", json={"candidateId": unknown_candidate_id}, expect_json=True),
        {404},
    )
    return scenario


def local_backend_scenario(
    base_url: str,
    *,
    mount_prefix: str = DEFAULT_MOUNT_PREFIX,
    candidate_id: str = DEFAULT_CANDIDATE_ID,
    health_path: str = "/api/health",
) -> Scenario:
    """Full local backend pass: health, email routes, send, then the email log for that candidate."""
    scenario = Scenario("local-backend", description="Health check plus the email routes of a full backend")
    scenario.add("Backend health endpoint", ProbeRequest(join_url(base_url, health_path)), {200})
    scenario.add(
        "Email routes test endpoint",
        ProbeRequest(_endpoint(base_url, mount_prefix, "/test"), expect_json=True),
        {200},
    )
    scenario.add(
        f"Send candidate session email ({candidate_id})",
        ProbeRequest(
            _endpoint(base_url, mount_prefix, SEND_PATH),
            method="POST",
            json={
                "candidateId": candidate_id,
                "recruiterEmail": "test@example.com",
                "message": "Test interview session",
            },
            expect_json=True,
        ),
        {200},
    )
    scenario.add(
        "Email logs",
        ProbeRequest(_endpoint(base_url, mount_prefix, f"/logs/{quote(candidate_id, safe='')}"), expect_json=True),
        {200},
    )
    return scenario


SCENARIOS: dict[str, ScenarioFactory] = {
    "email-api": email_api_scenario,
    "method-guard": method_guard_scenario,
    "local-backend": local_backend_scenario,
}


def build_scenario(name: str, base_url: str, **kwargs) -> Scenario:
    try:
        factory = SCENARIOS[name]
    except KeyError:
        raise ValueError(f"Unknown scenario {name!r}; choose from {', '.join(sorted(SCENARIOS))}") from None
    return factory(base_url, **kwargs)


__all__ = [
    "DEFAULT_CANDIDATE_ID",
    "SCENARIOS",
    "UNKNOWN_CANDIDATE_ID",
    "build_scenario",
    "email_api_scenario",
    "local_backend_scenario",
    "method_guard_scenario",
]
