# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import asyncio

from srvbench.common.config import BenchmarkDefaults
from srvbench.common.enums import CandidatePhase
from srvbench.common.exceptions import (
    BenchmarkError,
    BenchmarkTimeoutError,
    ConfigurationError,
    LoadGeneratorError,
)
from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.loadgen import LoadGeneratorProtocol, LoadGenRequest
from srvbench.orchestrator.models import BenchmarkMetrics, BenchmarkOutcome

__all__ = [
    "BenchmarkRunner",
]


class BenchmarkRunner(SrvBenchLoggerMixin):
    """Runs one bounded load test and turns the result into an outcome.

    Never raises for load generator problems: a timeout becomes a
    BENCHMARK_TIMEOUT outcome and any adapter error a BENCHMARK_ERROR outcome.
    Cancellation of the calling task is propagated.
    """

    def __init__(self, load_generator: LoadGeneratorProtocol, **kwargs) -> None:
        super().__init__(**kwargs)
        self.load_generator = load_generator

    async def run(
        self,
        url: str,
        duration_sec: int,
        connections: int,
        *,
        pipelining: int = BenchmarkDefaults.PIPELINING,
        title: str | None = None,
        timeout: float = BenchmarkDefaults.BENCHMARK_TIMEOUT,
    ) -> BenchmarkOutcome:
        title = title or url
        if timeout <= duration_sec:
            raise ConfigurationError(
                f"Benchmark timeout ({timeout}s) must be greater than "
                f"the duration ({duration_sec}s)"
            )

        request = LoadGenRequest(
            url=url,
            connections=connections,
            pipelining=pipelining,
            duration_sec=duration_sec,
            title=title,
        )
        self.info(
            f"Benchmarking {title} with {self.load_generator.name}: {duration_sec}s, "
            f"{connections} connections, pipelining {pipelining}"
        )

        try:
            async with asyncio.timeout(timeout):
                result = await self.load_generator.run(request)
        except TimeoutError:
            error = BenchmarkTimeoutError(
                title, f"Load test did not finish within {timeout}s"
            )
        except LoadGeneratorError as e:
            error = BenchmarkError(title, str(e))
        except Exception as e:
            self.exception(f"Load generator {self.load_generator.name} crashed")
            error = BenchmarkError(title, f"{type(e).__name__}: {e}")
        else:
            metrics = BenchmarkMetrics.from_raw(
                result.requests_per_sec_avg,
                result.latency_avg_ms,
                result.throughput_avg_bytes_per_sec,
            )
            return BenchmarkOutcome.succeeded(title, metrics)
        return BenchmarkOutcome.from_error(error, phase=CandidatePhase.BENCHMARKING)
