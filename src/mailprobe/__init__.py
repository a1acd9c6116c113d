# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
mailprobe package entrypoint.

A verification harness for the candidate-session email API: a minimal FastAPI
service exposing the email routes, an httpx-backed endpoint probe that turns every
outcome into data, and a scenario runner that reports ordered pass/fail results.
"""

from .config import EmailSettings, HttpSettings, ServiceConfig, load_http_settings
from .errors import ErrorCategory, MailProbeError, PortInUseError
from .http import HttpClient, HttpRequest, HttpResponse, HttpxClient, create_default_http_client, join_url, normalize
from .log import setup_logging
from .models import (
    HttpMethod,
    OutcomeKind,
    ProbeRequest,
    ProbeResult,
    RouteDescriptor,
    Scenario,
    ScenarioReport,
    ScenarioStep,
    StepOutcome,
)
from .probe import EndpointProbe, probe
from .routes import RouteGroup, list_routes
from .runtime import MailProbe
from .scenario import ScenarioRunner, build_scenario
from .version import __version__

__all__ = [
    "EmailSettings",
    "EndpointProbe",
    "ErrorCategory",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "MailProbe",
    "MailProbeError",
    "OutcomeKind",
    "PortInUseError",
    "ProbeRequest",
    "ProbeResult",
    "RouteDescriptor",
    "RouteGroup",
    "Scenario",
    "ScenarioReport",
    "ScenarioRunner",
    "ScenarioStep",
    "ServiceConfig",
    "StepOutcome",
    "__version__",
    "build_scenario",
    "create_default_http_client",
    "join_url",
    "list_routes",
    "load_http_settings",
    "normalize",
    "probe",
    "setup_logging",
]
