# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""CSV exporter for the comparison report."""

import csv
import io

from srvbench.exporters.base_exporter import BaseReportExporter
from srvbench.exporters.report import build_report_rows

CSV_HEADER = [
    "name",
    "requests_per_sec",
    "latency_ms",
    "throughput_mbs",
    "status",
    "error",
]


class ReportCsvExporter(BaseReportExporter):
    """Exports the comparison report as one CSV row per candidate."""

    def get_file_name(self) -> str:
        return "srvbench_report.csv"

    def _generate_content(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(CSV_HEADER)
        for row in build_report_rows(self._summary):
            writer.writerow(
                [
                    row.name,
                    row.requests_per_sec,
                    row.latency_ms,
                    row.throughput_mbs,
                    row.status,
                    row.error,
                ]
            )
        return buf.getvalue()
