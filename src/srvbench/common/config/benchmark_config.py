# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path
from typing import Annotated, Self

from pydantic import Field, field_validator, model_validator

from srvbench.common.config.base_config import BaseConfig
from srvbench.common.config.cli_parameter import CLIParameter
from srvbench.common.config.config_defaults import (
    BenchmarkDefaults,
    OutputDefaults,
    ProbeDefaults,
    ProcessDefaults,
)
from srvbench.common.config.groups import Groups
from srvbench.common.enums import LoadGeneratorType


class BenchmarkConfig(BaseConfig):
    """Per-run settings shared by every candidate in the registry."""

    duration: Annotated[
        int,
        Field(
            ge=1,
            description="Length of each load test in seconds.",
        ),
        CLIParameter(name=("--duration", "-d"), group=Groups.LOAD_GENERATOR),
    ] = BenchmarkDefaults.DURATION

    connections: Annotated[
        int,
        Field(
            ge=1,
            description="Number of concurrent connections the load generator keeps open.",
        ),
        CLIParameter(name=("--connections", "-c"), group=Groups.LOAD_GENERATOR),
    ] = BenchmarkDefaults.CONNECTIONS

    pipelining: Annotated[
        int,
        Field(
            ge=1,
            description="Number of pipelined requests per connection (ignored by wrk).",
        ),
        CLIParameter(name=("--pipelining", "-p"), group=Groups.LOAD_GENERATOR),
    ] = BenchmarkDefaults.PIPELINING

    load_generator: Annotated[
        LoadGeneratorType,
        Field(description="External load generation engine to drive."),
        CLIParameter(name=("--load-generator",), group=Groups.LOAD_GENERATOR),
    ] = BenchmarkDefaults.LOAD_GENERATOR

    start_delay: Annotated[
        float,
        Field(
            ge=0,
            description="Seconds to wait after spawning a candidate before the first probe.",
        ),
        CLIParameter(name=("--start-delay",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.START_DELAY

    http_timeout: Annotated[
        float,
        Field(gt=0, description="Timeout in seconds for the HTTP readiness request."),
        CLIParameter(name=("--http-timeout",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.HTTP_TIMEOUT

    socket_timeout: Annotated[
        float,
        Field(
            gt=0,
            description="Timeout in seconds for the raw TCP connect fallback check.",
        ),
        CLIParameter(name=("--socket-timeout",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.SOCKET_TIMEOUT

    probe_timeout: Annotated[
        float,
        Field(
            gt=0,
            description="Overall budget in seconds for the probing phase, across all attempts.",
        ),
        CLIParameter(name=("--probe-timeout",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.PROBE_TIMEOUT

    probe_attempts: Annotated[
        int,
        Field(
            ge=1,
            description="How many times to probe an unreachable candidate before giving up.",
        ),
        CLIParameter(name=("--probe-attempts",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.PROBE_ATTEMPTS

    probe_retry_interval: Annotated[
        float,
        Field(ge=0, description="Seconds between probe attempts."),
        CLIParameter(name=("--probe-retry-interval",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.PROBE_RETRY_INTERVAL

    strict_http_status: Annotated[
        bool,
        Field(
            description="Treat a readiness response outside [200, 400) as unreachable "
            "instead of logging a warning and benchmarking anyway.",
        ),
        CLIParameter(name=("--strict-http-status",), group=Groups.TIMEOUTS),
    ] = ProbeDefaults.STRICT_HTTP_STATUS

    benchmark_timeout: Annotated[
        float,
        Field(
            gt=0,
            description="Ceiling in seconds for one load test, including generator startup. "
            "Must be greater than --duration.",
        ),
        CLIParameter(name=("--benchmark-timeout",), group=Groups.TIMEOUTS),
    ] = BenchmarkDefaults.BENCHMARK_TIMEOUT

    termination_grace_period: Annotated[
        float,
        Field(
            ge=0,
            description="Seconds to wait after SIGTERM before a candidate is killed.",
        ),
        CLIParameter(name=("--termination-grace-period",), group=Groups.PROCESS),
    ] = ProcessDefaults.TERMINATION_GRACE_PERIOD

    kill_timeout: Annotated[
        float,
        Field(
            gt=0,
            description="Seconds to wait for a killed candidate to be reaped.",
        ),
        CLIParameter(name=("--kill-timeout",), group=Groups.PROCESS),
    ] = ProcessDefaults.KILL_TIMEOUT

    cooldown_seconds: Annotated[
        float,
        Field(
            ge=0,
            description="Pause between candidates so the machine can settle. Default is 0.",
        ),
        CLIParameter(name=("--cooldown-seconds",), group=Groups.PROCESS),
    ] = BenchmarkDefaults.COOLDOWN_SECONDS

    check_port_free: Annotated[
        bool,
        Field(
            description="Refuse to launch a candidate whose port already accepts connections.",
        ),
        CLIParameter(name=("--check-port-free",), group=Groups.PROCESS),
    ] = ProcessDefaults.CHECK_PORT_FREE

    output_dir: Annotated[
        Path | None,
        Field(description="Directory for the JSON and CSV comparison reports."),
        CLIParameter(name=("--output-dir", "-o"), group=Groups.OUTPUT),
    ] = OutputDefaults.OUTPUT_DIR

    log_dir: Annotated[
        Path | None,
        Field(
            description="Directory for per-candidate stdout/stderr logs. "
            "Candidate output is discarded when unset.",
        ),
        CLIParameter(name=("--log-dir",), group=Groups.OUTPUT),
    ] = OutputDefaults.LOG_DIR

    log_level: Annotated[
        str,
        Field(description="Log level (TRACE, DEBUG, INFO, WARNING, ERROR)."),
        CLIParameter(name=("--log-level",), group=Groups.OUTPUT),
    ] = OutputDefaults.LOG_LEVEL

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(
                f"Invalid log level: '{v}'. "
                "Expected one of TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return level

    @model_validator(mode="after")
    def validate_timeouts(self) -> Self:
        """Reject timeout combinations that would fail every candidate."""
        if self.benchmark_timeout <= self.duration:
            raise ValueError(
                f"--benchmark-timeout ({self.benchmark_timeout}s) must be greater than "
                f"--duration ({self.duration}s) to leave room for load generator startup."
            )
        if self.probe_timeout < self.http_timeout:
            raise ValueError(
                f"--probe-timeout ({self.probe_timeout}s) must be at least "
                f"--http-timeout ({self.http_timeout}s)."
            )
        return self
