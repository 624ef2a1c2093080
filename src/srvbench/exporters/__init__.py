# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.exporters.base_exporter import BaseReportExporter
from srvbench.exporters.console_exporter import ConsoleReportExporter
from srvbench.exporters.csv_exporter import ReportCsvExporter
from srvbench.exporters.exporter_config import ExporterConfig
from srvbench.exporters.json_exporter import ReportJsonExporter
from srvbench.exporters.report import ReportRow, build_report_rows

__all__ = [
    "BaseReportExporter",
    "ConsoleReportExporter",
    "ExporterConfig",
    "ReportCsvExporter",
    "ReportJsonExporter",
    "ReportRow",
    "build_report_rows",
]
