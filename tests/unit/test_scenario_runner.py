# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io

import pytest

from mailprobe.errors import ErrorCategory
from mailprobe.http.adapters import StubHttpClient
from mailprobe.http.models import HttpResponse
from mailprobe.models import OutcomeKind, ProbeRequest, ProbeResult, Scenario, ScenarioStep
from mailprobe.probe import EndpointProbe
from mailprobe.scenario import SCENARIOS, ScenarioRunner, build_scenario, classify, print_report
from mailprobe.scenario.catalog import UNKNOWN_CANDIDATE_ID


def _runner(stub: StubHttpClient) -> ScenarioRunner:
    return ScenarioRunner(EndpointProbe(stub))


def _three_step_scenario() -> Scenario:
    scenario = Scenario("three-steps")
    scenario.add("first", ProbeRequest("http://svc/one"), {200})
    scenario.add("second", ProbeRequest("http://unreachable/two"), {200})
    scenario.add("third", ProbeRequest("http://svc/three", method="POST"), {201})
    return scenario


def test_runner_continues_after_transport_failure():
    stub = StubHttpClient(
        {
            "http://svc/one": HttpResponse(ok=True, status_code=200, text="up"),
            "POST http://svc/three": HttpResponse(ok=True, status_code=201, text="created"),
        }
    )
    report = _runner(stub).execute(_three_step_scenario())

    assert [o.label for o in report.outcomes] == ["first", "second", "third"]
    assert [o.index for o in report.outcomes] == [1, 2, 3]
    assert [o.kind for o in report.outcomes] == [
        OutcomeKind.PASSED,
        OutcomeKind.TRANSPORT_FAILURE,
        OutcomeKind.PASSED,
    ]
    assert [r.url for r in stub.requests] == ["http://svc/one", "http://unreachable/two", "http://svc/three"]
    summary = report.summary()
    assert summary["total"] == 3
    assert summary["transport_failures"] == 1
    assert summary["http_errors"] == 0
    assert report.all_passed is False


def test_run_yields_outcomes_one_probe_at_a_time():
    stub = StubHttpClient({"http://svc/one": HttpResponse(ok=True, status_code=200)})
    outcomes = _runner(stub).run(_three_step_scenario())

    first = next(outcomes)
    assert first.label == "first"
    assert len(stub.requests) == 1
    next(outcomes)
    assert len(stub.requests) == 2


def test_summary_separates_http_errors_from_transport_failures():
    stub = StubHttpClient(
        {
            "http://svc/one": HttpResponse(ok=True, status_code=500, text="boom"),
            "http://unreachable/two": HttpResponse(ok=False, error_message="timed out", error_category=ErrorCategory.TIMEOUT),
            "POST http://svc/three": HttpResponse(ok=True, status_code=201),
        }
    )
    report = _runner(stub).execute(_three_step_scenario())

    assert report.count(OutcomeKind.UNEXPECTED_STATUS) == 1
    assert report.count(OutcomeKind.TIMEOUT) == 1
    assert [o.label for o in report.http_errors] == ["first"]
    assert [o.label for o in report.transport_failures] == ["second"]
    assert report.to_dict()["summary"]["TIMEOUT"] == 1


def test_classify_defaults_to_any_2xx():
    step = ScenarioStep("any", ProbeRequest("http://svc"))
    assert classify(step, ProbeResult(status_code=204)) == OutcomeKind.PASSED
    assert classify(step, ProbeResult(status_code=302)) == OutcomeKind.UNEXPECTED_STATUS
    guarded = ScenarioStep("guard", ProbeRequest("http://svc"), frozenset({405}))
    assert classify(guarded, ProbeResult(status_code=405)) == OutcomeKind.PASSED
    assert classify(guarded, ProbeResult(status_code=200)) == OutcomeKind.UNEXPECTED_STATUS


def test_print_report_lists_every_outcome_in_order():
    stub = StubHttpClient(
        {
            "http://svc/one": HttpResponse(ok=True, status_code=200, text='{"success": true}'),
            "POST http://svc/three": HttpResponse(ok=True, status_code=404, text="missing"),
        }
    )
    report = _runner(stub).execute(_three_step_scenario())
    buffer = io.StringIO()
    print_report(report, stream=buffer)
    output = buffer.getvalue()

    assert output.index("1. [PASS] first") < output.index("2. [ERROR] second") < output.index("3. [FAIL] third")
    assert "Status: 404 (expected 201)" in output
    assert "No stubbed response configured" in output
    assert "Summary: 3 steps, 1 passed, 1 unexpected status, 1 transport failures, 0 timeouts" in output
    assert "HTTP error statuses: third (404)" in output
    assert "Transport-layer failures: second (CONNECTION_ERROR)" in output


@pytest.mark.parametrize("name", sorted(SCENARIOS))
def test_catalog_scenarios_target_the_mount_prefix(name):
    scenario = build_scenario(name, "http://localhost:3333/")
    assert scenario.name == name
    assert scenario.steps
    for step in scenario.steps:
        assert step.request.url.startswith("http://localhost:3333/api/")
        assert "//api" not in step.request.url


def test_method_guard_scenario_expects_405_then_success():
    scenario = build_scenario("method-guard", "http://svc", candidate_id="abc")
    first, second, third, fourth = scenario.steps
    assert first.request.method == "GET"
    assert first.expected_statuses == frozenset({405})
    assert second.request.json["candidateId"] == "abc"
    assert third.expected_statuses == frozenset({400})
    assert fourth.request.json == {"candidateId": UNKNOWN_CANDIDATE_ID}
    assert fourth.expected_statuses == frozenset({404})


def test_local_backend_scenario_ends_with_email_logs():
    scenario = build_scenario("local-backend", "http://svc/", candidate_id="a b")
    send, logs = scenario.steps[-2:]
    assert send.request.json["candidateId"] == "a b"
    assert logs.label == "Email logs"
    assert logs.request.method == "GET"
    assert logs.request.url == "http://svc/api/email/logs/a%20b"
    assert logs.expected_statuses == frozenset({200})


def test_unknown_scenario_is_rejected():
    with pytest.raises(ValueError):
        build_scenario("nope", "http://svc")
