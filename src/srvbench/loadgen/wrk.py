# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import re

from srvbench.common.constants import (
    BYTES_PER_GIB,
    BYTES_PER_KIB,
    BYTES_PER_MIB,
    MILLIS_PER_SECOND,
)
from srvbench.common.environment import Environment
from srvbench.common.exceptions import LoadGeneratorError
from srvbench.loadgen.base import SubprocessLoadGenerator
from srvbench.loadgen.protocols import LoadGenRequest, LoadGenResult

_VALUE_WITH_UNIT = re.compile(r"^([0-9]*\.?[0-9]+)([a-zA-Z]*)$")

_LATENCY_SCALE_MS = {
    "us": 1 / MILLIS_PER_SECOND,
    "ms": 1.0,
    "s": float(MILLIS_PER_SECOND),
    "m": 60.0 * MILLIS_PER_SECOND,
}

_SIZE_SCALE_BYTES = {
    "": 1,
    "B": 1,
    "KB": BYTES_PER_KIB,
    "MB": BYTES_PER_MIB,
    "GB": BYTES_PER_GIB,
}


def _split_unit(token: str) -> tuple[float, str]:
    match = _VALUE_WITH_UNIT.match(token.strip())
    if match is None:
        raise ValueError(f"Cannot parse value: {token!r}")
    return float(match.group(1)), match.group(2)


def parse_latency_ms(token: str) -> float:
    """Convert a wrk latency such as ``3.21ms`` or ``850.00us`` to milliseconds."""
    value, unit = _split_unit(token)
    if unit not in _LATENCY_SCALE_MS:
        raise ValueError(f"Unknown latency unit in {token!r}")
    return value * _LATENCY_SCALE_MS[unit]


def parse_size_bytes(token: str) -> float:
    """Convert a wrk size such as ``1.50MB`` to bytes."""
    value, unit = _split_unit(token)
    if unit not in _SIZE_SCALE_BYTES:
        raise ValueError(f"Unknown size unit in {token!r}")
    return value * _SIZE_SCALE_BYTES[unit]


class WrkLoadGenerator(SubprocessLoadGenerator):
    """Drives ``wrk`` and parses its text summary. wrk has no pipelining option."""

    name = "wrk"

    def __init__(
        self, executable: str | None = None, threads: int | None = None, **kwargs
    ) -> None:
        super().__init__(executable=executable or Environment.LOADGEN.WRK_BIN, **kwargs)
        self.threads = threads or Environment.LOADGEN.WRK_THREADS

    def build_command(self, request: LoadGenRequest) -> list[str]:
        # wrk refuses more threads than connections
        threads = min(self.threads, request.connections)
        return [
            self.executable,
            f"-t{threads}",
            f"-c{request.connections}",
            f"-d{request.duration_sec}s",
            "--latency",
            request.url,
        ]

    def parse_output(self, stdout: str) -> LoadGenResult:
        rps = latency = transfer = None
        non2xx = 0
        for line in stdout.splitlines():
            line = line.strip()
            try:
                if line.startswith("Non-2xx"):
                    non2xx = int(line.split(":", 1)[1])
                elif line.startswith("Requests/sec"):
                    rps = float(line.split(":", 1)[1])
                elif line.startswith("Latency") and latency is None:
                    parts = line.split()
                    if len(parts) >= 2:
                        latency = parse_latency_ms(parts[1])
                elif line.startswith("Transfer/sec"):
                    transfer = parse_size_bytes(line.split(":", 1)[1])
            except ValueError as e:
                raise LoadGeneratorError(f"Unparseable wrk output line {line!r}: {e}") from e

        if rps is None or latency is None or transfer is None:
            raise LoadGeneratorError(
                "wrk output is missing Requests/sec, Latency or Transfer/sec"
            )
        if non2xx:
            self.warning(f"wrk reported {non2xx} non-2xx responses")
        return LoadGenResult(
            requests_per_sec_avg=rps,
            latency_avg_ms=latency,
            throughput_avg_bytes_per_sec=transfer,
        )
