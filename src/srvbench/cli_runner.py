# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
import signal
from pathlib import Path

from rich.console import Console

from srvbench.cli_utils import raise_startup_error_and_exit
from srvbench.common.config import BenchmarkConfig, CandidateRegistry, load_registry
from srvbench.common.exceptions import ConfigurationError, RegistryError
from srvbench.common.logging import setup_rich_logging
from srvbench.exporters import (
    ConsoleReportExporter,
    ExporterConfig,
    ReportCsvExporter,
    ReportJsonExporter,
)
from srvbench.loadgen import SubprocessLoadGenerator, create_load_generator
from srvbench.orchestrator import BenchmarkOrchestrator, BenchmarkRunner, RunSummary

logger = logging.getLogger(__name__)

RUN_LOG_FILE_NAME = "srvbench.log"


def run_benchmark(
    registry_path: Path,
    config: BenchmarkConfig,
    only: list[str] | None = None,
) -> RunSummary:
    """Benchmark every candidate in the registry and print the comparison report.

    Setup problems (unreadable registry, unknown candidate names, missing load
    generator) exit with status 1 before anything is started. Per-candidate
    failures and operator interrupts end up in the report instead.
    """
    log_file = config.log_dir / RUN_LOG_FILE_NAME if config.log_dir else None
    setup_rich_logging(config.log_level, log_file=log_file)

    try:
        registry = load_registry(registry_path)
        if only:
            registry = registry.select(only)
        load_generator = create_load_generator(config.load_generator)
        load_generator.ensure_available()
    except (RegistryError, ConfigurationError) as e:
        logger.debug("Setup failed", exc_info=True)
        raise_startup_error_and_exit(str(e))

    summary = asyncio.run(_run_orchestrator(registry, config, load_generator))

    ConsoleReportExporter(summary).export(Console())
    if config.output_dir is not None:
        json_path, csv_path = asyncio.run(
            _export_artifacts(summary, Path(config.output_dir))
        )
        logger.info(f"Report JSON written to: {json_path}")
        logger.info(f"Report CSV written to: {csv_path}")
    return summary


async def _run_orchestrator(
    registry: CandidateRegistry,
    config: BenchmarkConfig,
    load_generator: SubprocessLoadGenerator,
) -> RunSummary:
    orchestrator = BenchmarkOrchestrator(config, BenchmarkRunner(load_generator))

    loop = asyncio.get_running_loop()
    handled_signals = (signal.SIGINT, signal.SIGTERM)
    for sig in handled_signals:
        loop.add_signal_handler(sig, orchestrator.request_interrupt)
    try:
        return await orchestrator.execute(registry.candidates)
    finally:
        for sig in handled_signals:
            loop.remove_signal_handler(sig)


async def _export_artifacts(summary: RunSummary, output_dir: Path) -> tuple[Path, Path]:
    """Write the JSON and CSV reports concurrently."""
    exporter_config = ExporterConfig(summary=summary, output_dir=output_dir)
    json_path, csv_path = await asyncio.gather(
        ReportJsonExporter(exporter_config).export(),
        ReportCsvExporter(exporter_config).export(),
    )
    return json_path, csv_path


def validate_registry(registry_path: Path, console: Console | None = None) -> CandidateRegistry:
    """Load the registry and print the candidates it describes."""
    from rich.table import Table

    console = console or Console()
    try:
        registry = load_registry(registry_path)
    except RegistryError as e:
        raise_startup_error_and_exit(str(e), title="Invalid Registry")

    table = Table(title=f"{len(registry.candidates)} candidate(s) in {registry_path}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("URL")
    table.add_column("Launch")
    table.add_column("External", justify="center")
    for candidate in registry.candidates:
        table.add_row(
            candidate.name,
            candidate.url,
            " ".join(candidate.launch_argv),
            "yes" if candidate.external else "no",
        )
    console.print(table)
    return registry
