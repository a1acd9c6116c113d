# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Human-readable rendering of scenario outcomes."""

from __future__ import annotations

from typing import TextIO

from ..errors import error_category_to_reason
from ..models import OutcomeKind, ScenarioReport, StepOutcome

BODY_PREVIEW_CHARS = 400

_MARKERS = {
    OutcomeKind.PASSED: "PASS",
    OutcomeKind.UNEXPECTED_STATUS: "FAIL",
    OutcomeKind.TRANSPORT_FAILURE: "ERROR",
    OutcomeKind.TIMEOUT: "TIMEOUT",
}


def _preview(text: str, limit: int = BODY_PREVIEW_CHARS) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit] + "...[truncated]"


def format_outcome(outcome: StepOutcome) -> list[str]:
    result = outcome.result
    lines = [f"{outcome.index}. [{_MARKERS[outcome.kind]}] {outcome.label}"]
    if result.transport_failed:
        reason = error_category_to_reason(result.error_category)
        lines.append(f"   Error: {result.error_message}" + (f" ({reason})" if reason else ""))
    else:
        expected = ", ".join(str(code) for code in sorted(outcome.expected_statuses)) or "2xx"
        lines.append(f"   Status: {result.status_code} (expected {expected})")
        if result.body_text:
            lines.append(f"   Response: {_preview(result.body_text)}")
    if result.diagnostic:
        lines.append(f"   Note: {result.diagnostic}")
    return lines


def print_report(report: ScenarioReport, stream: TextIO | None = None) -> None:
    def emit(line: str = "") -> None:
        print(line, file=stream)

    emit(f"[mailprobe] Scenario: {report.scenario}")
    for outcome in report.outcomes:
        for line in format_outcome(outcome):
            emit(line)
    summary = report.summary()
    emit()
    emit(
        "Summary: {total} steps, {passed} passed, {unexpected} unexpected status, "
        "{transport} transport failures, {timeouts} timeouts".format(
            total=summary["total"],
            passed=summary[OutcomeKind.PASSED.value],
            unexpected=summary[OutcomeKind.UNEXPECTED_STATUS.value],
            transport=summary[OutcomeKind.TRANSPORT_FAILURE.value],
            timeouts=summary[OutcomeKind.TIMEOUT.value],
        )
    )
    if report.http_errors:
        emit("HTTP error statuses: " + ", ".join(f"{o.label} ({o.result.status_code})" for o in report.http_errors))
    if report.transport_failures:
        emit("Transport-layer failures: " + ", ".join(f"{o.label} ({o.result.error_category.value})" for o in report.transport_failures))
