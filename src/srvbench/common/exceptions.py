# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for SrvBench.

Per-candidate errors (launch, probe, benchmark, unexpected exit) are caught by
the orchestrator and turned into failure outcomes. Setup errors (registry,
configuration) end the run.
"""

from srvbench.common.enums import FailureKind


class SrvBenchError(Exception):
    """Base class for all SrvBench errors."""


class RegistryError(SrvBenchError):
    """The candidate registry could not be read or is invalid."""


class ConfigurationError(SrvBenchError):
    """The benchmark configuration is unusable (e.g. missing load generator)."""


class CandidateError(SrvBenchError):
    """An error local to one candidate. Carries the failure kind to record."""

    failure_kind: FailureKind = FailureKind.INTERNAL_ERROR

    def __init__(self, candidate: str, message: str) -> None:
        super().__init__(f"[{candidate}] {message}")
        self.candidate = candidate
        self.message = message


class LaunchError(CandidateError):
    """The candidate process could not be created."""

    failure_kind = FailureKind.LAUNCH_ERROR


class ProbeError(CandidateError):
    """Base class for readiness probe failures."""

    failure_kind = FailureKind.PROBE_UNREACHABLE


class ProbeUnreachableError(ProbeError):
    """Neither the HTTP nor the socket check succeeded."""


class ProbeTimeoutError(ProbeError):
    """The probe phase did not finish within its budget."""

    failure_kind = FailureKind.PROBE_TIMEOUT


class BenchmarkError(CandidateError):
    """The load generator reported a failure."""

    failure_kind = FailureKind.BENCHMARK_ERROR


class BenchmarkTimeoutError(BenchmarkError):
    """The load generator did not complete within the benchmark timeout."""

    failure_kind = FailureKind.BENCHMARK_TIMEOUT


class UnexpectedExitError(CandidateError):
    """The candidate process died while starting or probing."""

    failure_kind = FailureKind.UNEXPECTED_EXIT


class LoadGeneratorError(SrvBenchError):
    """Raised by load generator adapters when the engine fails."""


class SlotOccupiedError(SrvBenchError):
    """A second process was placed in the active candidate slot."""


class DuplicateOutcomeError(SrvBenchError):
    """An outcome was recorded twice for the same candidate."""
