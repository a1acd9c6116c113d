# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scenario orchestration: ordered probes with independent outcomes."""

from .catalog import SCENARIOS, build_scenario
from .report import format_outcome, print_report
from .runner import ScenarioRunner, classify

__all__ = ["SCENARIOS", "ScenarioRunner", "build_scenario", "classify", "format_outcome", "print_report"]
