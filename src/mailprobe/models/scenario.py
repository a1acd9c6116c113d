# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scenario definitions and per-step outcomes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .probe import ProbeRequest, ProbeResult


class OutcomeKind(str, Enum):
    PASSED = "PASSED"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    TIMEOUT = "TIMEOUT"


@dataclass(frozen=True)
class ScenarioStep:
    """One labelled probe. An empty `expected_statuses` accepts any 2xx status."""

    label: str
    request: ProbeRequest
    expected_statuses: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_statuses", frozenset(self.expected_statuses))

    def accepts(self, status_code: int) -> bool:
        if self.expected_statuses:
            return status_code in self.expected_statuses
        return 200 <= status_code < 300


@dataclass
class Scenario:
    name: str
    steps: list[ScenarioStep] = field(default_factory=list)
    description: str = ""

    def add(
        self,
        label: str,
        request: ProbeRequest,
        expected_statuses: Iterable[int] = (),
    ) -> Scenario:
        self.steps.append(ScenarioStep(label, request, frozenset(expected_statuses)))
        return self

    def __len__(self) -> int:
        return len(self.steps)


@dataclass(frozen=True)
class StepOutcome:
    index: int
    label: str
    result: ProbeResult
    kind: OutcomeKind
    expected_statuses: frozenset[int] = frozenset()

    @property
    def passed(self) -> bool:
        return self.kind == OutcomeKind.PASSED

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "label": self.label,
            "kind": self.kind.value,
            "expected_statuses": sorted(self.expected_statuses),
            "result": self.result.to_dict(),
        }


@dataclass
class ScenarioReport:
    scenario: str
    outcomes: list[StepOutcome] = field(default_factory=list)

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind == kind)

    @property
    def all_passed(self) -> bool:
        return all(outcome.passed for outcome in self.outcomes)

    @property
    def http_errors(self) -> list[StepOutcome]:
        """Steps where the server answered with a 4xx/5xx status."""
        return [outcome for outcome in self.outcomes if outcome.result.is_http_error]

    @property
    def transport_failures(self) -> list[StepOutcome]:
        """Steps that never got an HTTP status (connection failures and timeouts)."""
        return [outcome for outcome in self.outcomes if outcome.result.transport_failed]

    def summary(self) -> dict[str, int]:
        summary = {kind.value: self.count(kind) for kind in OutcomeKind}
        summary["total"] = len(self.outcomes)
        summary["http_errors"] = len(self.http_errors)
        summary["transport_failures"] = len(self.transport_failures)
        return summary

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "summary": self.summary(),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
