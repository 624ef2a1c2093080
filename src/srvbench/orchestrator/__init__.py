# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.orchestrator.models import (
    BenchmarkMetrics,
    BenchmarkOutcome,
    RunSummary,
)
from srvbench.orchestrator.orchestrator import BenchmarkOrchestrator, Spawner
from srvbench.orchestrator.runner import BenchmarkRunner
from srvbench.orchestrator.slot import ActiveCandidateSlot

__all__ = [
    "ActiveCandidateSlot",
    "BenchmarkMetrics",
    "BenchmarkOrchestrator",
    "BenchmarkOutcome",
    "BenchmarkRunner",
    "RunSummary",
    "Spawner",
]
