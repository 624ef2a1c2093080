# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Process-wide tunables loaded from `SRVBENCH_*` environment variables.

Settings are grouped by subsystem and accessed as attributes, e.g.
`Environment.PROBE.USER_AGENT` is read from `SRVBENCH_PROBE_USER_AGENT`.
Per-run options that users normally change live in BenchmarkConfig instead.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _ProbeSettings(BaseSettings):
    """Readiness probe behavior."""

    model_config = SettingsConfigDict(env_prefix="SRVBENCH_PROBE_")

    USER_AGENT: str = Field(
        default="srvbench-probe",
        description="User-Agent header sent with the HTTP readiness request",
    )
    FOLLOW_REDIRECTS: bool = Field(
        default=False,
        description="Follow redirects during the HTTP readiness request. "
        "Off by default since 3xx already counts as ready.",
    )


class _ProcessSettings(BaseSettings):
    """Candidate process management."""

    model_config = SettingsConfigDict(env_prefix="SRVBENCH_PROCESS_")

    INHERIT_ENV: bool = Field(
        default=True,
        description="Pass the orchestrator's environment to candidate processes",
    )
    PORT_CHECK_TIMEOUT: float = Field(
        default=0.1,
        gt=0,
        description="Connect timeout in seconds for the port-in-use preflight check",
    )


class _LoadGenSettings(BaseSettings):
    """External load generator executables."""

    model_config = SettingsConfigDict(env_prefix="SRVBENCH_LOADGEN_")

    AUTOCANNON_BIN: str = Field(
        default="autocannon", description="autocannon executable name or path"
    )
    WRK_BIN: str = Field(default="wrk", description="wrk executable name or path")
    WRK_THREADS: int = Field(
        default=2, ge=1, description="Number of wrk threads (-t)"
    )
    OUTPUT_TAIL_CHARS: int = Field(
        default=2000,
        ge=0,
        description="How much of a failed load generator's output to keep in error messages",
    )


class _LoggingSettings(BaseSettings):
    """Logging output."""

    model_config = SettingsConfigDict(env_prefix="SRVBENCH_LOGGING_")

    LEVEL: str = Field(default="INFO", description="Default log level")
    RICH_TRACEBACKS: bool = Field(
        default=True, description="Render exception tracebacks with rich"
    )
    SHOW_PATH: bool = Field(
        default=False, description="Show the source path of each log record"
    )


class _Environment(BaseSettings):
    """Root of all SrvBench environment settings."""

    model_config = SettingsConfigDict(env_prefix="SRVBENCH_")

    PROBE: _ProbeSettings = Field(default_factory=_ProbeSettings)
    PROCESS: _ProcessSettings = Field(default_factory=_ProcessSettings)
    LOADGEN: _LoadGenSettings = Field(default_factory=_LoadGenSettings)
    LOGGING: _LoggingSettings = Field(default_factory=_LoggingSettings)


Environment = _Environment()
