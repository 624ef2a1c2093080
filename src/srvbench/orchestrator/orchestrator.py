# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Sequential benchmark orchestrator for candidate HTTP servers."""

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from srvbench.common.config import BenchmarkConfig, CandidateDescriptor
from srvbench.common.enums import CandidatePhase, FailureKind
from srvbench.common.exceptions import (
    BenchmarkTimeoutError,
    CandidateError,
    DuplicateOutcomeError,
    LaunchError,
    ProbeTimeoutError,
    ProbeUnreachableError,
    SlotOccupiedError,
    UnexpectedExitError,
)
from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.loadgen import create_load_generator
from srvbench.orchestrator.models import BenchmarkOutcome, RunSummary
from srvbench.orchestrator.runner import BenchmarkRunner
from srvbench.orchestrator.slot import ActiveCandidateSlot
from srvbench.probe import ReadinessProber
from srvbench.process import ProcessExit, RunningProcess, spawn, terminate
from srvbench.timing import PhaseTimerSet, ResolutionCell

__all__ = [
    "BenchmarkOrchestrator",
    "Spawner",
]

Spawner = Callable[..., Awaitable[RunningProcess]]

START_DELAY_TIMER = "start_delay"
PROBE_TIMER = "probe"
BENCHMARK_TIMER = "benchmark"


@dataclass
class _CandidateRun:
    """Mutable state of the candidate currently being processed."""

    descriptor: CandidateDescriptor
    cell: ResolutionCell[BenchmarkOutcome]
    timers: PhaseTimerSet
    phase: CandidatePhase = CandidatePhase.IDLE
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def name(self) -> str:
        return self.descriptor.name


class BenchmarkOrchestrator(SrvBenchLoggerMixin):
    """Runs every candidate through spawn, probe, benchmark and teardown.

    Candidates are processed strictly one at a time. For each one, every
    source that can decide its fate (probe verdict, phase timers, the process
    exiting, the benchmark result, an operator interrupt) writes to a
    single-assignment ResolutionCell. Whichever writes first wins; the
    pipeline task is then cancelled and the process torn down exactly once
    before the next candidate starts.

    Args:
        config: Per-run settings shared by all candidates
        runner: Benchmark runner. Built from ``config.load_generator`` if omitted.
        prober: Readiness prober. Built from ``config.strict_http_status`` if omitted.
        spawner: Coroutine function that launches a candidate, with the
            signature of :func:`srvbench.process.spawn`.
        slot: Holder for the one live candidate process.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        runner: BenchmarkRunner | None = None,
        *,
        prober: ReadinessProber | None = None,
        spawner: Spawner = spawn,
        slot: ActiveCandidateSlot | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config
        self.runner = runner or BenchmarkRunner(
            create_load_generator(config.load_generator)
        )
        self.prober = prober or ReadinessProber(
            strict_http_status=config.strict_http_status
        )
        self.spawner = spawner
        self.slot = slot or ActiveCandidateSlot()
        self._results: dict[str, BenchmarkOutcome] = {}
        self._active: _CandidateRun | None = None
        self._interrupted = False
        self._interrupt_event: asyncio.Event | None = None

    @property
    def results(self) -> dict[str, BenchmarkOutcome]:
        return dict(self._results)

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    def request_interrupt(self) -> None:
        """Stop the run: resolve the current candidate as interrupted and skip the rest.

        Must be called from the event loop thread (e.g. via
        ``loop.add_signal_handler``).
        """
        if self._interrupted:
            self.warning("Interrupt already in progress, waiting for teardown")
            return
        self._interrupted = True
        self.warning("Interrupt received, stopping after teardown of the current candidate")
        if self._interrupt_event is not None:
            self._interrupt_event.set()
        run = self._active
        if run is not None:
            outcome = BenchmarkOutcome.failed(
                run.name, FailureKind.INTERRUPTED, "Interrupted by operator", run.phase
            )
            self._resolve(run, outcome, source="interrupt")

    async def execute(self, candidates: Iterable[CandidateDescriptor]) -> RunSummary:
        """Benchmark every candidate in order.

        Args:
            candidates: Candidates in registry order

        Returns:
            RunSummary with one outcome per candidate that was processed
        """
        candidates = list(candidates)
        self._interrupt_event = asyncio.Event()
        if self._interrupted:
            self._interrupt_event.set()
        total = len(candidates)

        self.info(
            f"Starting benchmark of {total} candidate(s) with "
            f"{self.runner.load_generator.name}"
        )

        for index, descriptor in enumerate(candidates):
            if self._interrupted:
                break

            self.info(f"[{index + 1}/{total}] Benchmarking {descriptor.name}...")
            try:
                outcome = await self._run_candidate(descriptor)
            except Exception as e:
                self.exception(f"Unexpected error while benchmarking {descriptor.name}")
                outcome = BenchmarkOutcome.failed(
                    descriptor.name,
                    FailureKind.INTERNAL_ERROR,
                    f"{type(e).__name__}: {e}",
                )
            self._record(outcome)

            if outcome.success:
                metrics = outcome.metrics
                self.info(
                    f"[{index + 1}/{total}] {descriptor.name}: "
                    f"{metrics.requests_per_sec} req/s, "
                    f"{metrics.latency_display} ms, {metrics.throughput_display} MB/s"
                )
            else:
                self.error(
                    f"[{index + 1}/{total}] {descriptor.name} failed "
                    f"({outcome.failure}): {outcome.error}"
                )

            if index + 1 < total and not self._interrupted:
                await self._cooldown()

        summary = RunSummary(
            candidates=[c.name for c in candidates],
            outcomes=dict(self._results),
            interrupted=self._interrupted,
        )
        self.info(
            f"Benchmark complete: {len(summary.successful)}/{total} candidate(s) "
            "produced metrics"
            + (f", {len(summary.untried)} skipped after interrupt" if summary.untried else "")
        )
        return summary

    def _record(self, outcome: BenchmarkOutcome) -> None:
        if outcome.candidate in self._results:
            raise DuplicateOutcomeError(
                f"Outcome for {outcome.candidate} has already been recorded"
            )
        self._results[outcome.candidate] = outcome

    async def _cooldown(self) -> None:
        cooldown = self.config.cooldown_seconds
        if cooldown <= 0:
            return
        self.info(f"Applying cooldown: {cooldown}s")
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._interrupt_event.wait(), timeout=cooldown)

    async def _run_candidate(self, descriptor: CandidateDescriptor) -> BenchmarkOutcome:
        run = _CandidateRun(
            descriptor=descriptor,
            cell=ResolutionCell(owner=descriptor.name),
            timers=PhaseTimerSet(owner=descriptor.name),
        )
        self._active = run
        try:
            self._transition(run, CandidatePhase.STARTING)
            try:
                process = await self.spawner(
                    descriptor,
                    log_dir=self.config.log_dir,
                    check_port_free=self.config.check_port_free,
                )
            except LaunchError as e:
                self._fail(run, e, source="spawn")
                self._transition(run, CandidatePhase.FAILED)
                return self._finalize(run)

            try:
                self.slot.occupy(process)
            except SlotOccupiedError:
                await self._terminate(process)
                raise

            try:
                process.add_exit_listener(lambda exit_: self._on_process_exit(run, exit_))
                pipeline = asyncio.create_task(
                    self._pipeline(run, process), name=f"pipeline-{descriptor.name}"
                )
                try:
                    await run.cell.wait()
                finally:
                    run.timers.cancel_all()
                    if not pipeline.done():
                        pipeline.cancel()
                    await asyncio.wait([pipeline])
            finally:
                await self._teardown(run)
            return self._finalize(run)
        finally:
            self._active = None

    async def _pipeline(self, run: _CandidateRun, process: RunningProcess) -> None:
        """Drive one candidate from spawn to a benchmark result.

        Resolves the cell with whatever outcome it reaches. Any other source
        that resolves the cell first causes this task to be cancelled.
        """
        try:
            await self._start_and_benchmark(run, process)
        except CandidateError as e:
            self._fail(run, e, source="pipeline")
        except Exception as e:
            self.exception(f"[{run.name}] Unexpected error in {run.phase} phase")
            outcome = BenchmarkOutcome.failed(
                run.name,
                FailureKind.INTERNAL_ERROR,
                f"{type(e).__name__}: {e}",
                phase=run.phase,
            )
            self._resolve(run, outcome, source="pipeline")

    async def _start_and_benchmark(
        self, run: _CandidateRun, process: RunningProcess
    ) -> None:
        config = self.config
        descriptor = run.descriptor

        await run.timers.sleep(START_DELAY_TIMER, config.start_delay)
        if run.cell.resolved:
            return

        self._transition(run, CandidatePhase.PROBING)
        run.timers.start(
            PROBE_TIMER,
            config.probe_timeout,
            lambda: self._fail(
                run,
                ProbeTimeoutError(
                    run.name, f"Probing did not finish within {config.probe_timeout}s"
                ),
                source="probe_timer",
            ),
        )
        verdict = await self.prober.probe_until_ready(
            descriptor.endpoint,
            http_timeout=config.http_timeout,
            socket_timeout=config.socket_timeout,
            path=descriptor.path,
            attempts=config.probe_attempts,
            retry_interval=config.probe_retry_interval,
        )
        # the probe timer or an exit notification may have won while probing
        if run.cell.resolved:
            return
        run.timers.cancel(PROBE_TIMER)
        if not verdict.proceed:
            raise ProbeUnreachableError(run.name, f"{descriptor.url} is {verdict.describe()}")
        self.info(f"[{run.name}] {verdict.describe()}")

        self._transition(run, CandidatePhase.BENCHMARKING)
        run.timers.start(
            BENCHMARK_TIMER,
            config.benchmark_timeout,
            lambda: self._fail(
                run,
                BenchmarkTimeoutError(
                    run.name,
                    f"Benchmark did not finish within {config.benchmark_timeout}s",
                ),
                source="benchmark_timer",
            ),
        )
        outcome = await self.runner.run(
            descriptor.url,
            config.duration,
            config.connections,
            pipelining=config.pipelining,
            title=descriptor.name,
            timeout=config.benchmark_timeout,
        )
        run.timers.cancel(BENCHMARK_TIMER)
        self._resolve(run, outcome, source="benchmark")

    def _on_process_exit(self, run: _CandidateRun, exit_: ProcessExit) -> None:
        if run.cell.resolved:
            return
        if run.phase.is_startup and exit_.is_failure:
            self._fail(
                run,
                UnexpectedExitError(
                    run.name, f"Process {exit_.describe()} while {run.phase}"
                ),
                source="process_exit",
            )
        else:
            self.warning(f"[{run.name}] process {exit_.describe()} while {run.phase}")

    def _fail(self, run: _CandidateRun, error: CandidateError, *, source: str) -> bool:
        return self._resolve(
            run, BenchmarkOutcome.from_error(error, phase=run.phase), source=source
        )

    def _resolve(
        self, run: _CandidateRun, outcome: BenchmarkOutcome, *, source: str
    ) -> bool:
        if not run.cell.try_resolve(outcome, source):
            return False
        self._log_resolution(run, outcome, source)
        return True

    def _log_resolution(
        self, run: _CandidateRun, outcome: BenchmarkOutcome, source: str
    ) -> None:
        if outcome.success:
            self.debug(f"[{run.name}] resolved by {source}: success")
        else:
            self.debug(f"[{run.name}] resolved by {source}: {outcome.failure}")

    def _transition(self, run: _CandidateRun, phase: CandidatePhase) -> None:
        self.debug(f"[{run.name}] {run.phase} -> {phase}")
        run.phase = phase

    async def _terminate(self, process: RunningProcess | None) -> None:
        await terminate(
            process,
            grace_period=self.config.termination_grace_period,
            kill_timeout=self.config.kill_timeout,
        )

    async def _teardown(self, run: _CandidateRun) -> None:
        await self._terminate(self.slot.release())
        self._transition(
            run,
            CandidatePhase.TORN_DOWN
            if run.phase == CandidatePhase.BENCHMARKING
            else CandidatePhase.FAILED,
        )

    def _finalize(self, run: _CandidateRun) -> BenchmarkOutcome:
        outcome = run.cell.value
        return outcome.model_copy(
            update={
                "candidate": run.name,
                "duration_sec": round(time.perf_counter() - run.started_at, 3),
            }
        )
