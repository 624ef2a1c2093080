# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.common.enums import LoadGeneratorType
from srvbench.loadgen.autocannon import AutocannonLoadGenerator
from srvbench.loadgen.base import SubprocessLoadGenerator
from srvbench.loadgen.protocols import (
    LoadGeneratorProtocol,
    LoadGenRequest,
    LoadGenResult,
)
from srvbench.loadgen.wrk import WrkLoadGenerator

_LOAD_GENERATORS: dict[LoadGeneratorType, type[SubprocessLoadGenerator]] = {
    LoadGeneratorType.AUTOCANNON: AutocannonLoadGenerator,
    LoadGeneratorType.WRK: WrkLoadGenerator,
}


def create_load_generator(kind: LoadGeneratorType) -> SubprocessLoadGenerator:
    """Instantiate the adapter for the given engine."""
    return _LOAD_GENERATORS[LoadGeneratorType(kind)]()


__all__ = [
    "AutocannonLoadGenerator",
    "LoadGenRequest",
    "LoadGenResult",
    "LoadGeneratorProtocol",
    "SubprocessLoadGenerator",
    "WrkLoadGenerator",
    "create_load_generator",
]
