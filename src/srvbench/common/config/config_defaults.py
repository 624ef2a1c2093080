# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass

from srvbench.common.enums import LoadGeneratorType


@dataclass(frozen=True)
class BenchmarkDefaults:
    DURATION = 10
    CONNECTIONS = 100
    PIPELINING = 10
    LOAD_GENERATOR = LoadGeneratorType.AUTOCANNON
    BENCHMARK_TIMEOUT = 30.0
    COOLDOWN_SECONDS = 0.0


@dataclass(frozen=True)
class ProbeDefaults:
    START_DELAY = 1.0
    HTTP_TIMEOUT = 2.0
    SOCKET_TIMEOUT = 1.0
    PROBE_TIMEOUT = 5.0
    PROBE_ATTEMPTS = 1
    PROBE_RETRY_INTERVAL = 0.5
    STRICT_HTTP_STATUS = False


@dataclass(frozen=True)
class ProcessDefaults:
    TERMINATION_GRACE_PERIOD = 2.0
    KILL_TIMEOUT = 1.0
    CHECK_PORT_FREE = True


@dataclass(frozen=True)
class OutputDefaults:
    OUTPUT_DIR = None
    LOG_DIR = None
    LOG_LEVEL = "INFO"
