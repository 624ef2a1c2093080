# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import orjson

from srvbench.common.environment import Environment
from srvbench.common.exceptions import LoadGeneratorError
from srvbench.loadgen.base import SubprocessLoadGenerator
from srvbench.loadgen.protocols import LoadGenRequest, LoadGenResult


class AutocannonLoadGenerator(SubprocessLoadGenerator):
    """Drives ``autocannon`` and reads its ``--json`` summary."""

    name = "autocannon"

    def __init__(self, executable: str | None = None, **kwargs) -> None:
        super().__init__(
            executable=executable or Environment.LOADGEN.AUTOCANNON_BIN, **kwargs
        )

    def build_command(self, request: LoadGenRequest) -> list[str]:
        return [
            self.executable,
            "--json",
            "--connections", str(request.connections),
            "--pipelining", str(request.pipelining),
            "--duration", str(request.duration_sec),
            "--title", request.title,
            request.url,
        ]  # fmt: skip

    def parse_output(self, stdout: str) -> LoadGenResult:
        try:
            data = orjson.loads(stdout)
            result = LoadGenResult(
                requests_per_sec_avg=float(data["requests"]["average"]),
                latency_avg_ms=float(data["latency"]["average"]),
                throughput_avg_bytes_per_sec=float(data["throughput"]["average"]),
            )
        except orjson.JSONDecodeError as e:
            raise LoadGeneratorError(f"autocannon produced invalid JSON: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise LoadGeneratorError(
                f"autocannon output is missing metrics: {e!r}"
            ) from e

        errors = data.get("errors", 0) or 0
        timeouts = data.get("timeouts", 0) or 0
        non2xx = data.get("non2xx", 0) or 0
        if errors or timeouts or non2xx:
            self.warning(
                f"{data.get('title', 'autocannon')}: {errors} errors, "
                f"{timeouts} timeouts, {non2xx} non-2xx responses"
            )
        return result
