# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporter for the comparison report."""

import orjson

from srvbench.exporters.base_exporter import BaseReportExporter
from srvbench.exporters.report import build_report_rows


class ReportJsonExporter(BaseReportExporter):
    """Exports the comparison report to JSON.

    Output structure:
    {
        "interrupted": false,
        "winner": "fast-server",
        "rows": [{"name": ..., "requests_per_sec": 12000, ...}],
        "outcomes": {"fast-server": {... full BenchmarkOutcome ...}}
    }

    Rows follow registry order and use "N/A" for missing values; outcomes
    keep the unformatted numbers for downstream tooling.
    """

    def get_file_name(self) -> str:
        return "srvbench_report.json"

    def _generate_content(self) -> str:
        winner = self._summary.winner()
        output = {
            "interrupted": self._summary.interrupted,
            "winner": winner.candidate if winner else None,
            "rows": [row.to_dict() for row in build_report_rows(self._summary)],
            "outcomes": {
                name: outcome.model_dump(mode="json")
                for name, outcome in self._summary.outcomes.items()
            },
        }
        return orjson.dumps(output, option=orjson.OPT_INDENT_2).decode("utf-8")
