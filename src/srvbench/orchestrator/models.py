# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for benchmark orchestration."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Self

from pydantic import BaseModel, Field

from srvbench.common.constants import BYTES_PER_MIB
from srvbench.common.enums import CandidatePhase, FailureKind
from srvbench.common.exceptions import CandidateError


def round_half_up(value: float, places: int = 0) -> Decimal:
    """Round halves away from zero (1500.5 -> 1501), unlike round()."""
    quantum = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


class BenchmarkMetrics(BaseModel):
    """Normalized metrics from one successful load test.

    Attributes:
        requests_per_sec: Average requests per second, rounded to an integer
        latency_ms: Average latency in milliseconds, two decimals
        throughput_mbs: Average throughput in MB/s (bytes / 1024^2), two decimals
    """

    requests_per_sec: int
    latency_ms: float
    throughput_mbs: float

    @classmethod
    def from_raw(
        cls,
        requests_per_sec: float,
        latency_ms: float,
        throughput_bytes_per_sec: float,
    ) -> Self:
        """Normalize raw load generator averages."""
        return cls(
            requests_per_sec=int(round_half_up(requests_per_sec)),
            latency_ms=float(round_half_up(latency_ms, 2)),
            throughput_mbs=float(round_half_up(throughput_bytes_per_sec / BYTES_PER_MIB, 2)),
        )

    @property
    def latency_display(self) -> str:
        return f"{self.latency_ms:.2f}"

    @property
    def throughput_display(self) -> str:
        return f"{self.throughput_mbs:.2f}"


class BenchmarkOutcome(BaseModel):
    """Final result of one candidate.

    Attributes:
        candidate: Candidate name
        success: Whether the candidate produced metrics
        metrics: Metrics when successful
        failure: Failure classification when not successful
        error: Human-readable failure description
        phase: Phase the candidate was in when its outcome was decided
        duration_sec: Wall-clock seconds from spawn to resolution
    """

    candidate: str
    success: bool
    metrics: BenchmarkMetrics | None = None
    failure: FailureKind | None = None
    error: str | None = None
    phase: CandidatePhase = CandidatePhase.IDLE
    duration_sec: float = 0.0

    @classmethod
    def succeeded(
        cls,
        candidate: str,
        metrics: BenchmarkMetrics,
        phase: CandidatePhase = CandidatePhase.BENCHMARKING,
    ) -> Self:
        return cls(candidate=candidate, success=True, metrics=metrics, phase=phase)

    @classmethod
    def failed(
        cls,
        candidate: str,
        failure: FailureKind,
        error: str,
        phase: CandidatePhase = CandidatePhase.IDLE,
    ) -> Self:
        return cls(
            candidate=candidate,
            success=False,
            failure=failure,
            error=error,
            phase=phase,
        )

    @classmethod
    def from_error(
        cls, error: CandidateError, phase: CandidatePhase = CandidatePhase.IDLE
    ) -> Self:
        """Failure outcome classified by the error's failure kind."""
        return cls.failed(error.candidate, error.failure_kind, error.message, phase=phase)


class RunSummary(BaseModel):
    """Everything one orchestrator run produced.

    Attributes:
        candidates: Registered candidate names, in registry order
        outcomes: One outcome per processed candidate, in processing order
        interrupted: Whether the run was stopped by the operator
    """

    candidates: list[str] = Field(default_factory=list)
    outcomes: dict[str, BenchmarkOutcome] = Field(default_factory=dict)
    interrupted: bool = False

    @property
    def untried(self) -> list[str]:
        """Candidates that never ran because the run was interrupted."""
        return [name for name in self.candidates if name not in self.outcomes]

    @property
    def successful(self) -> list[BenchmarkOutcome]:
        return [o for o in self.outcomes.values() if o.success]

    def winner(self) -> BenchmarkOutcome | None:
        """Successful outcome with the highest requests per second, if any."""
        successful = self.successful
        if not successful:
            return None
        return max(successful, key=lambda o: o.metrics.requests_per_sec)
