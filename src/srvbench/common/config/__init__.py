# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.common.config.base_config import BaseConfig
from srvbench.common.config.benchmark_config import BenchmarkConfig
from srvbench.common.config.cli_parameter import CLIParameter
from srvbench.common.config.config_defaults import (
    BenchmarkDefaults,
    OutputDefaults,
    ProbeDefaults,
    ProcessDefaults,
)
from srvbench.common.config.groups import Groups
from srvbench.common.config.registry import (
    CandidateDescriptor,
    CandidateRegistry,
    load_registry,
)

__all__ = [
    "BaseConfig",
    "BenchmarkConfig",
    "BenchmarkDefaults",
    "CLIParameter",
    "CandidateDescriptor",
    "CandidateRegistry",
    "Groups",
    "OutputDefaults",
    "ProbeDefaults",
    "ProcessDefaults",
    "load_registry",
]
