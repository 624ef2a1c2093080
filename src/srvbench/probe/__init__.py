# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.probe.prober import ProbeVerdict, ReadinessProber

__all__ = [
    "ProbeVerdict",
    "ReadinessProber",
]
