# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Enumerations shared across SrvBench."""

from enum import Enum


class CaseInsensitiveStrEnum(str, Enum):
    """String enum that matches values case-insensitively (used for CLI input)."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class CandidatePhase(CaseInsensitiveStrEnum):
    """Lifecycle phase of a single candidate."""

    IDLE = "idle"
    STARTING = "starting"
    PROBING = "probing"
    BENCHMARKING = "benchmarking"
    TORN_DOWN = "torn_down"
    FAILED = "failed"

    @property
    def is_startup(self) -> bool:
        """Whether an unexpected process exit in this phase aborts the candidate."""
        return self in (CandidatePhase.STARTING, CandidatePhase.PROBING)


class ProbeStatus(CaseInsensitiveStrEnum):
    """Verdict of a readiness probe."""

    READY = "ready"
    REACHABLE_NOT_HTTP = "reachable_not_http"
    UNREACHABLE = "unreachable"


class FailureKind(CaseInsensitiveStrEnum):
    """Why a candidate did not produce metrics."""

    LAUNCH_ERROR = "launch_error"
    PROBE_UNREACHABLE = "probe_unreachable"
    PROBE_TIMEOUT = "probe_timeout"
    BENCHMARK_ERROR = "benchmark_error"
    BENCHMARK_TIMEOUT = "benchmark_timeout"
    UNEXPECTED_EXIT = "unexpected_exit"
    INTERRUPTED = "interrupted"
    INTERNAL_ERROR = "internal_error"


class LoadGeneratorType(CaseInsensitiveStrEnum):
    """External load generation engines SrvBench knows how to drive."""

    AUTOCANNON = "autocannon"
    WRK = "wrk"
