# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class LoadGenRequest:
    """Parameters for one load test."""

    url: str
    connections: int
    pipelining: int
    duration_sec: int
    title: str


@dataclass(frozen=True, slots=True)
class LoadGenResult:
    """Aggregate metrics reported by a load generator, before normalization."""

    requests_per_sec_avg: float
    latency_avg_ms: float
    throughput_avg_bytes_per_sec: float


@runtime_checkable
class LoadGeneratorProtocol(Protocol):
    """An external engine that drives sustained concurrent load at a URL."""

    name: str

    def ensure_available(self) -> None:
        """Raise ConfigurationError if the engine cannot be run on this machine."""
        ...

    async def run(self, request: LoadGenRequest) -> LoadGenResult:
        """Run one load test. Raises LoadGeneratorError on failure."""
        ...
