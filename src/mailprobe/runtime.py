# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring one HTTP client through probes and scenarios."""

from __future__ import annotations

from contextlib import suppress

from .config import load_http_settings
from .http.client import HttpClient, create_default_http_client
from .models import ProbeRequest, ProbeResult, Scenario, ScenarioReport
from .probe import EndpointProbe
from .scenario.catalog import build_scenario
from .scenario.runner import ScenarioRunner


class MailProbe:
    """
    Convenience wrapper that shares a single HTTP client across probe and scenario runs.

    Use as a context manager so the client is closed when verification finishes.
    """

    def __init__(self, http_client: HttpClient | None = None):
        self.http_settings = load_http_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.endpoint_probe = EndpointProbe(self.http_client)
        self.runner = ScenarioRunner(self.endpoint_probe)

    def probe(self, request: ProbeRequest) -> ProbeResult:
        return self.endpoint_probe.probe(request)

    def run(self, scenario: Scenario) -> ScenarioReport:
        return self.runner.execute(scenario)

    def run_named(self, name: str, base_url: str, **kwargs) -> ScenarioReport:
        return self.run(build_scenario(name, base_url, **kwargs))

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> MailProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
