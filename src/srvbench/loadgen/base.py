# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared plumbing for load generators that run as a child process."""

from __future__ import annotations

import asyncio
import contextlib
import shutil
from abc import ABC, abstractmethod

from srvbench.common.environment import Environment
from srvbench.common.exceptions import ConfigurationError, LoadGeneratorError
from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.loadgen.protocols import LoadGenRequest, LoadGenResult


class SubprocessLoadGenerator(SrvBenchLoggerMixin, ABC):
    """Runs an external benchmark tool and parses its output.

    Subclasses build the command line and parse stdout. If the surrounding
    task is cancelled (benchmark timeout, operator interrupt) the tool is
    killed before the cancellation propagates.
    """

    name: str = "subprocess"

    def __init__(self, executable: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.executable = executable

    def ensure_available(self) -> None:
        if shutil.which(self.executable) is None:
            raise ConfigurationError(
                f"{self.name} executable '{self.executable}' not found in PATH"
            )

    @abstractmethod
    def build_command(self, request: LoadGenRequest) -> list[str]:
        """Return argv for one load test."""

    @abstractmethod
    def parse_output(self, stdout: str) -> LoadGenResult:
        """Extract aggregate metrics. Raises LoadGeneratorError if impossible."""

    async def run(self, request: LoadGenRequest) -> LoadGenResult:
        cmd = self.build_command(request)
        self.debug(f"Running {self.name}: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise LoadGeneratorError(f"Failed to start {self.name}: {e}") from e

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            with contextlib.suppress(Exception):
                await proc.wait()
            raise

        stdout_text = stdout.decode(errors="replace")
        if proc.returncode != 0:
            tail = Environment.LOADGEN.OUTPUT_TAIL_CHARS
            error_msg = f"{self.name} failed with exit code {proc.returncode}"
            stderr_text = stderr.decode(errors="replace")
            if stderr_text:
                error_msg += f"\nStderr: {stderr_text[-tail:]}"
            raise LoadGeneratorError(error_msg)

        return self.parse_output(stdout_text)
