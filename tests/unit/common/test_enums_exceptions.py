# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from srvbench.common.enums import CandidatePhase, FailureKind, LoadGeneratorType
from srvbench.common.exceptions import (
    BenchmarkTimeoutError,
    CandidateError,
    LaunchError,
    ProbeTimeoutError,
    ProbeUnreachableError,
    SrvBenchError,
    UnexpectedExitError,
)


class TestEnums:
    @pytest.mark.parametrize(
        "phase,is_startup",
        [
            (CandidatePhase.IDLE, False),
            (CandidatePhase.STARTING, True),
            (CandidatePhase.PROBING, True),
            (CandidatePhase.BENCHMARKING, False),
            (CandidatePhase.TORN_DOWN, False),
            (CandidatePhase.FAILED, False),
        ],
    )  # fmt: skip
    def test_is_startup(self, phase, is_startup):
        assert phase.is_startup is is_startup

    def test_case_insensitive_lookup(self):
        assert LoadGeneratorType("AutoCannon") is LoadGeneratorType.AUTOCANNON

    def test_str_is_value(self):
        assert str(FailureKind.PROBE_TIMEOUT) == "probe_timeout"


class TestCandidateErrors:
    @pytest.mark.parametrize(
        "error_cls,failure_kind",
        [
            (LaunchError, FailureKind.LAUNCH_ERROR),
            (ProbeUnreachableError, FailureKind.PROBE_UNREACHABLE),
            (ProbeTimeoutError, FailureKind.PROBE_TIMEOUT),
            (BenchmarkTimeoutError, FailureKind.BENCHMARK_TIMEOUT),
            (UnexpectedExitError, FailureKind.UNEXPECTED_EXIT),
        ],
    )  # fmt: skip
    def test_failure_kind(self, error_cls, failure_kind):
        error = error_cls("echo", "boom")
        assert error.failure_kind == failure_kind
        assert isinstance(error, CandidateError)
        assert isinstance(error, SrvBenchError)

    def test_message_carries_candidate_name(self):
        error = LaunchError("echo", "no such file")
        assert str(error) == "[echo] no such file"
        assert error.candidate == "echo"
        assert error.message == "no such file"
