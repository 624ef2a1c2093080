# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line interface for SrvBench."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from srvbench import __version__
from srvbench.common.config import BenchmarkConfig

app = App(
    name="srvbench",
    help="Benchmark HTTP server implementations one after another and compare them.",
    version=__version__,
)


@app.command(name="run")
def run(
    registry: Annotated[
        Path, Parameter(help="JSON file listing the candidate servers.")
    ],
    config: Annotated[BenchmarkConfig | None, Parameter(name="*")] = None,
    *,
    only: Annotated[
        list[str] | None,
        Parameter(help="Benchmark only these candidates (repeatable)."),
    ] = None,
) -> None:
    """Start, probe, benchmark and tear down every candidate in REGISTRY."""
    from srvbench.cli_runner import run_benchmark

    run_benchmark(registry, config or BenchmarkConfig(), only=only)


@app.command(name="validate")
def validate(
    registry: Annotated[
        Path, Parameter(help="JSON file listing the candidate servers.")
    ],
) -> None:
    """Check REGISTRY and list its candidates without starting anything."""
    from srvbench.cli_runner import validate_registry

    validate_registry(registry)
