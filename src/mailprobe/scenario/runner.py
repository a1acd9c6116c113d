# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Run a scenario step by step."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..models import OutcomeKind, ProbeResult, Scenario, ScenarioReport, ScenarioStep, StepOutcome
from ..probe import EndpointProbe

logger = logging.getLogger(__name__)


def classify(step: ScenarioStep, result: ProbeResult) -> OutcomeKind:
    if result.timed_out:
        return OutcomeKind.TIMEOUT
    if result.status_code is None:
        return OutcomeKind.TRANSPORT_FAILURE
    if step.accepts(result.status_code):
        return OutcomeKind.PASSED
    return OutcomeKind.UNEXPECTED_STATUS


class ScenarioRunner:
    """
    Executes scenario steps in declaration order.

    Each probe finishes before the next one starts, so later steps can rely on the
    side effects of earlier ones. A failing step never stops the run.
    """

    def __init__(self, endpoint_probe: EndpointProbe | None = None):
        self.endpoint_probe = endpoint_probe or EndpointProbe()

    def run(self, scenario: Scenario) -> Iterator[StepOutcome]:
        logger.info("Running scenario %s (%d steps)", scenario.name, len(scenario.steps))
        for index, step in enumerate(scenario.steps, start=1):
            result = self.endpoint_probe.probe(step.request)
            kind = classify(step, result)
            if kind != OutcomeKind.PASSED:
                logger.warning("Step %d (%s) of %s: %s", index, step.label, scenario.name, kind.value)
            yield StepOutcome(
                index=index,
                label=step.label,
                result=result,
                kind=kind,
                expected_statuses=step.expected_statuses,
            )

    def execute(self, scenario: Scenario) -> ScenarioReport:
        return ScenarioReport(scenario=scenario.name, outcomes=list(self.run(scenario)))
