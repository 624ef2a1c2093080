# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.process.handle import (
    ExitListener,
    ProcessExit,
    RunningProcess,
    spawn,
    terminate,
)

__all__ = [
    "ExitListener",
    "ProcessExit",
    "RunningProcess",
    "spawn",
    "terminate",
]
