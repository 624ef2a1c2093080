# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from srvbench.exporters.report import STATUS_OK, build_report_rows
from srvbench.orchestrator.models import RunSummary


class ConsoleReportExporter:
    """Prints the comparison table and the fastest candidate."""

    def __init__(self, summary: RunSummary) -> None:
        self._summary = summary

    def get_renderable(self) -> Table:
        table = Table(title="Benchmark Results", title_style="bold")
        table.add_column("Server", style="cyan", no_wrap=True)
        table.add_column("Requests/sec", justify="right")
        table.add_column("Latency (ms)", justify="right")
        table.add_column("Throughput (MB/s)", justify="right")
        table.add_column("Status")
        table.add_column("Error", overflow="fold")

        for row in build_report_rows(self._summary):
            status_style = "green" if row.status == STATUS_OK else "red"
            table.add_row(
                escape(row.name),
                str(row.requests_per_sec),
                row.latency_ms,
                row.throughput_mbs,
                f"[{status_style}]{row.status}[/{status_style}]",
                escape(row.error),
            )
        return table

    def export(self, console: Console) -> None:
        console.print()
        console.print(self.get_renderable())

        if self._summary.interrupted:
            console.print(
                f"[yellow]Run interrupted; {len(self._summary.untried)} candidate(s) not run[/yellow]"
            )
        winner = self._summary.winner()
        if winner is not None:
            console.print(
                f"[bold green]Winner:[/bold green] {escape(winner.candidate)} "
                f"({winner.metrics.requests_per_sec} req/s)"
            )
        else:
            console.print("[red]No candidate produced metrics[/red]")
