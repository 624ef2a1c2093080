# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Configuration for report exporters."""

from dataclasses import dataclass
from pathlib import Path

from srvbench.orchestrator.models import RunSummary


@dataclass(slots=True)
class ExporterConfig:
    """Input for report exporters.

    Attributes:
        summary: RunSummary to export
        output_dir: Directory where export files will be written
    """

    summary: RunSummary
    output_dir: Path
