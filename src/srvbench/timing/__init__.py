# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.timing.phase_timers import PhaseTimer, PhaseTimerSet
from srvbench.timing.resolution import ResolutionCell

__all__ = [
    "PhaseTimer",
    "PhaseTimerSet",
    "ResolutionCell",
]
