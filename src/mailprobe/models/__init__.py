# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for mailprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .probe import ProbeRequest, ProbeResult
from .route import HttpMethod, RouteDescriptor
from .scenario import OutcomeKind, Scenario, ScenarioReport, ScenarioStep, StepOutcome

__all__ = [
    "Headers",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "OutcomeKind",
    "ProbeRequest",
    "ProbeResult",
    "RouteDescriptor",
    "Scenario",
    "ScenarioReport",
    "ScenarioStep",
    "StepOutcome",
]
