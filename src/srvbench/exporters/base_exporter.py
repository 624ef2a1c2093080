# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Base class for file-based report exporters."""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.exporters.exporter_config import ExporterConfig


class BaseReportExporter(SrvBenchLoggerMixin, ABC):
    """Writes a RunSummary to a single file in the output directory.

    Subclasses only decide the file name and render the content.
    """

    def __init__(self, config: ExporterConfig, **kwargs) -> None:
        super().__init__(**kwargs)
        self._summary = config.summary
        self._output_dir = Path(config.output_dir)

    @abstractmethod
    def get_file_name(self) -> str:
        """Name of the file written inside the output directory."""

    @abstractmethod
    def _generate_content(self) -> str:
        """Render the export file content."""

    async def export(self) -> Path:
        """Write the export file and return its path."""
        await asyncio.to_thread(self._output_dir.mkdir, parents=True, exist_ok=True)
        path = self._output_dir / self.get_file_name()
        await asyncio.to_thread(
            path.write_text, self._generate_content(), encoding="utf-8"
        )
        self.debug(f"Wrote {path}")
        return path
