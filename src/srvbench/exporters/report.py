# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Flattening of a RunSummary into one display row per registered candidate."""

from dataclasses import asdict, dataclass

from srvbench.common.constants import NOT_AVAILABLE
from srvbench.orchestrator.models import BenchmarkOutcome, RunSummary

__all__ = [
    "ReportRow",
    "build_report_rows",
]

STATUS_OK = "ok"
STATUS_NOT_RUN = "not run"


@dataclass(frozen=True, slots=True)
class ReportRow:
    """One line of the comparison report. Missing values are "N/A"."""

    name: str
    requests_per_sec: int | str
    latency_ms: str
    throughput_mbs: str
    status: str
    error: str

    @classmethod
    def from_outcome(cls, name: str, outcome: BenchmarkOutcome | None) -> "ReportRow":
        if outcome is None:
            return cls(
                name=name,
                requests_per_sec=NOT_AVAILABLE,
                latency_ms=NOT_AVAILABLE,
                throughput_mbs=NOT_AVAILABLE,
                status=STATUS_NOT_RUN,
                error="",
            )
        if outcome.success and outcome.metrics is not None:
            return cls(
                name=name,
                requests_per_sec=outcome.metrics.requests_per_sec,
                latency_ms=outcome.metrics.latency_display,
                throughput_mbs=outcome.metrics.throughput_display,
                status=STATUS_OK,
                error="",
            )
        return cls(
            name=name,
            requests_per_sec=NOT_AVAILABLE,
            latency_ms=NOT_AVAILABLE,
            throughput_mbs=NOT_AVAILABLE,
            status=str(outcome.failure) if outcome.failure else "failed",
            error=outcome.error or "",
        )

    def to_dict(self) -> dict[str, int | str]:
        return asdict(self)


def build_report_rows(summary: RunSummary) -> list[ReportRow]:
    """One row per registered candidate, in registry order."""
    names = list(summary.candidates)
    # outcomes recorded for names the summary does not list still get a row
    names.extend(name for name in summary.outcomes if name not in names)
    return [ReportRow.from_outcome(name, summary.outcomes.get(name)) for name in names]
