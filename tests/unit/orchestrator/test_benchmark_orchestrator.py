# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for BenchmarkOrchestrator using in-memory processes, probers and load generators."""

import asyncio
import time
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from srvbench.common.config import BenchmarkConfig, CandidateDescriptor
from srvbench.common.enums import CandidatePhase, FailureKind, ProbeStatus
from srvbench.common.exceptions import DuplicateOutcomeError, LaunchError
from srvbench.loadgen import LoadGenResult
from srvbench.orchestrator import (
    ActiveCandidateSlot,
    BenchmarkOrchestrator,
    BenchmarkOutcome,
    BenchmarkRunner,
)
from srvbench.orchestrator.orchestrator import PROBE_TIMER
from srvbench.probe import ProbeVerdict
from srvbench.process import ProcessExit

ECHO_RESULT = LoadGenResult(
    requests_per_sec_avg=11999.6,
    latency_avg_ms=3.2149,
    throughput_avg_bytes_per_sec=1.5 * 1024 * 1024,
)
READY = ProbeVerdict(ProbeStatus.READY, http_status=200)


class FakeProcess:
    """Stands in for RunningProcess; counts terminate calls."""

    def __init__(self, descriptor: CandidateDescriptor) -> None:
        self.descriptor = descriptor
        self.pid: int | None = 4242
        self.exit_status: ProcessExit | None = None
        self.terminate_calls = 0
        self._listeners = []

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def exited(self) -> bool:
        return self.exit_status is not None

    def add_exit_listener(self, listener) -> None:
        if self.exit_status is not None:
            asyncio.get_running_loop().call_soon(listener, self.exit_status)
            return
        self._listeners.append(listener)

    def simulate_exit(self, returncode: int) -> None:
        self.exit_status = ProcessExit.from_returncode(returncode)
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(self.exit_status)

    async def terminate(self, grace_period: float, kill_timeout: float) -> None:
        self.terminate_calls += 1
        if self.exit_status is None:
            self.exit_status = ProcessExit(exit_code=None, signal="SIGTERM")
        self.pid = None


class FakeSpawner:
    """Async callable with the signature of ``srvbench.process.spawn``."""

    def __init__(
        self,
        exit_on_start: dict[str, tuple[float, int]] | None = None,
        launch_errors: set[str] | None = None,
    ) -> None:
        self.exit_on_start = exit_on_start or {}
        self.launch_errors = launch_errors or set()
        self.processes: dict[str, FakeProcess] = {}
        self.calls: list[tuple[str, dict]] = []

    async def __call__(self, descriptor: CandidateDescriptor, **kwargs) -> FakeProcess:
        self.calls.append((descriptor.name, kwargs))
        if descriptor.name in self.launch_errors:
            raise LaunchError(descriptor.name, "failed to start: no such file")
        process = FakeProcess(descriptor)
        self.processes[descriptor.name] = process
        if descriptor.name in self.exit_on_start:
            delay, returncode = self.exit_on_start[descriptor.name]
            asyncio.get_running_loop().call_later(delay, process.simulate_exit, returncode)
        return process


class FakeProber:
    """Returns canned verdicts per candidate port, optionally running a hook first."""

    def __init__(
        self,
        verdicts: dict[int, ProbeVerdict] | None = None,
        hook: Callable | None = None,
    ) -> None:
        self.verdicts = verdicts or {}
        self.hook = hook
        self.calls: list[tuple[str, int]] = []
        self.cancelled = False

    async def probe_until_ready(self, endpoint, **kwargs) -> ProbeVerdict:
        self.calls.append(endpoint)
        if self.hook is not None:
            try:
                result = self.hook(endpoint)
                if asyncio.iscoroutine(result):
                    await result
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        return self.verdicts.get(endpoint[1], READY)


def make_load_generator(**run_kwargs) -> MagicMock:
    generator = MagicMock()
    generator.name = "fake"
    generator.run = AsyncMock(**run_kwargs)
    return generator


@pytest.fixture
def candidates() -> list[CandidateDescriptor]:
    return [
        CandidateDescriptor(name=name, port=port, command=["srv", name])
        for name, port in [("echo", 4000), ("fast", 4001), ("slow", 4002)]
    ]


@pytest.fixture
def make_orchestrator(fast_config):
    def _make(
        config: BenchmarkConfig | None = None,
        spawner: FakeSpawner | None = None,
        prober: FakeProber | None = None,
        load_generator: MagicMock | None = None,
        slot: ActiveCandidateSlot | None = None,
        **config_overrides,
    ) -> BenchmarkOrchestrator:
        config = config or fast_config
        if config_overrides:
            config = config.model_copy(update=config_overrides)
        return BenchmarkOrchestrator(
            config,
            BenchmarkRunner(load_generator or make_load_generator(return_value=ECHO_RESULT)),
            prober=prober or FakeProber(),
            spawner=spawner or FakeSpawner(),
            slot=slot,
        )

    return _make


class TestHappyPath:
    async def test_single_candidate_metrics(self, make_orchestrator, candidates):
        """echo on port 4000 reports 12000 req/s, 3.21 ms, 1.50 MB/s."""
        spawner = FakeSpawner()
        load_generator = make_load_generator(return_value=ECHO_RESULT)
        orchestrator = make_orchestrator(spawner=spawner, load_generator=load_generator)

        summary = await orchestrator.execute(candidates[:1])

        outcome = summary.outcomes["echo"]
        assert outcome.success
        assert outcome.phase == CandidatePhase.BENCHMARKING
        assert outcome.metrics.requests_per_sec == 12000
        assert outcome.metrics.latency_display == "3.21"
        assert outcome.metrics.throughput_display == "1.50"
        assert outcome.duration_sec >= 0

        request = load_generator.run.await_args.args[0]
        assert request.url == "http://127.0.0.1:4000/"
        assert request.title == "echo"
        assert spawner.processes["echo"].terminate_calls == 1
        assert not orchestrator.slot.occupied

    async def test_every_candidate_gets_exactly_one_outcome(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner()
        orchestrator = make_orchestrator(spawner=spawner)

        summary = await orchestrator.execute(candidates)

        assert list(summary.outcomes) == ["echo", "fast", "slow"]
        assert all(o.success for o in summary.outcomes.values())
        assert summary.untried == []
        assert [p.terminate_calls for p in spawner.processes.values()] == [1, 1, 1]

    async def test_spawn_receives_process_options(
        self, make_orchestrator, candidates, tmp_path
    ):
        spawner = FakeSpawner()
        orchestrator = make_orchestrator(
            spawner=spawner, log_dir=tmp_path, check_port_free=False
        )
        await orchestrator.execute(candidates[:1])
        assert spawner.calls == [("echo", {"log_dir": tmp_path, "check_port_free": False})]

    async def test_reachable_not_http_is_benchmarked(self, make_orchestrator, candidates):
        prober = FakeProber({4000: ProbeVerdict(ProbeStatus.REACHABLE_NOT_HTTP)})
        orchestrator = make_orchestrator(prober=prober)
        summary = await orchestrator.execute(candidates[:1])
        assert summary.outcomes["echo"].success

    async def test_start_delay_precedes_probe(self, make_orchestrator, candidates):
        probed_at: list[float] = []
        prober = FakeProber(hook=lambda endpoint: probed_at.append(time.perf_counter()))
        orchestrator = make_orchestrator(prober=prober, start_delay=0.2)

        start = time.perf_counter()
        await orchestrator.execute(candidates[:1])

        assert probed_at[0] - start >= 0.2


class TestStartupFailures:
    async def test_launch_error_recorded_without_teardown(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner(launch_errors={"echo"})
        orchestrator = make_orchestrator(spawner=spawner)

        summary = await orchestrator.execute(candidates[:2])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.LAUNCH_ERROR
        assert outcome.phase == CandidatePhase.STARTING
        assert "no such file" in outcome.error
        assert "echo" not in spawner.processes
        assert summary.outcomes["fast"].success

    async def test_crash_during_startup_is_unexpected_exit(
        self, make_orchestrator, candidates
    ):
        """A candidate exiting with code 1 during start-delay fails; the next one still runs."""
        spawner = FakeSpawner(exit_on_start={"echo": (0.05, 1)})
        prober = FakeProber()
        orchestrator = make_orchestrator(spawner=spawner, prober=prober, start_delay=0.5)

        summary = await orchestrator.execute(candidates[:2])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.UNEXPECTED_EXIT
        assert outcome.phase == CandidatePhase.STARTING
        assert "exit code 1" in outcome.error
        assert spawner.processes["echo"].terminate_calls == 1
        assert ("127.0.0.1", 4000) not in prober.calls
        assert summary.outcomes["fast"].success

    async def test_crash_during_probing_is_unexpected_exit(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner()
        prober = FakeProber(
            hook=lambda endpoint: spawner.processes["echo"].simulate_exit(3)
            or asyncio.sleep(1)
        )
        orchestrator = make_orchestrator(spawner=spawner, prober=prober)

        summary = await orchestrator.execute(candidates[:1])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.UNEXPECTED_EXIT
        assert outcome.phase == CandidatePhase.PROBING
        assert prober.cancelled

    async def test_clean_exit_during_startup_is_left_to_the_probe(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner(exit_on_start={"echo": (0.01, 0)})
        prober = FakeProber(
            {4000: ProbeVerdict(ProbeStatus.UNREACHABLE, error=ConnectionRefusedError())}
        )
        orchestrator = make_orchestrator(spawner=spawner, prober=prober, start_delay=0.1)

        summary = await orchestrator.execute(candidates[:1])

        assert summary.outcomes["echo"].failure == FailureKind.PROBE_UNREACHABLE


class TestProbeFailures:
    async def test_unreachable(self, make_orchestrator, candidates):
        spawner = FakeSpawner()
        load_generator = make_load_generator(return_value=ECHO_RESULT)
        prober = FakeProber(
            {4000: ProbeVerdict(ProbeStatus.UNREACHABLE, error=ConnectionRefusedError())}
        )
        orchestrator = make_orchestrator(
            spawner=spawner, prober=prober, load_generator=load_generator
        )

        summary = await orchestrator.execute(candidates[:1])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.PROBE_UNREACHABLE
        assert outcome.phase == CandidatePhase.PROBING
        load_generator.run.assert_not_awaited()
        assert spawner.processes["echo"].terminate_calls == 1

    async def test_probe_timeout(self, make_orchestrator, candidates):
        spawner = FakeSpawner()
        prober = FakeProber(hook=lambda endpoint: asyncio.sleep(10))
        orchestrator = make_orchestrator(
            spawner=spawner, prober=prober, probe_timeout=0.1
        )

        start = time.perf_counter()
        summary = await orchestrator.execute(candidates[:1])

        assert time.perf_counter() - start < 5.0
        assert summary.outcomes["echo"].failure == FailureKind.PROBE_TIMEOUT
        assert prober.cancelled
        assert spawner.processes["echo"].terminate_calls == 1

    async def test_probe_success_racing_probe_timer_resolves_once(
        self, make_orchestrator, candidates
    ):
        """The probe timer fires in the same instant the probe reports READY."""
        spawner = FakeSpawner()
        load_generator = make_load_generator(return_value=ECHO_RESULT)
        orchestrator: BenchmarkOrchestrator | None = None

        def fire_probe_timer(endpoint):
            if endpoint[1] == 4000:
                orchestrator._active.timers.get(PROBE_TIMER).fire_now()

        orchestrator = make_orchestrator(
            spawner=spawner,
            prober=FakeProber(hook=fire_probe_timer),
            load_generator=load_generator,
        )

        summary = await orchestrator.execute(candidates[:2])

        assert summary.outcomes["echo"].failure == FailureKind.PROBE_TIMEOUT
        assert spawner.processes["echo"].terminate_calls == 1
        # only the second candidate reached the load generator
        assert load_generator.run.await_count == 1
        assert load_generator.run.await_args.args[0].title == "fast"


class TestBenchmarkPhase:
    async def test_load_generator_error(self, make_orchestrator, candidates):
        from srvbench.common.exceptions import LoadGeneratorError

        spawner = FakeSpawner()
        load_generator = make_load_generator(
            side_effect=LoadGeneratorError("autocannon failed with exit code 1")
        )
        orchestrator = make_orchestrator(spawner=spawner, load_generator=load_generator)

        summary = await orchestrator.execute(candidates[:1])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.BENCHMARK_ERROR
        assert outcome.phase == CandidatePhase.BENCHMARKING
        assert spawner.processes["echo"].terminate_calls == 1

    async def test_benchmark_timeout(self, make_orchestrator, candidates):
        cancelled = asyncio.Event()

        async def hang(request):
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        spawner = FakeSpawner()
        orchestrator = make_orchestrator(
            spawner=spawner,
            load_generator=make_load_generator(side_effect=hang),
            duration=1,
            benchmark_timeout=1.2,
        )

        summary = await orchestrator.execute(candidates[:1])

        assert summary.outcomes["echo"].failure == FailureKind.BENCHMARK_TIMEOUT
        assert cancelled.is_set()
        assert spawner.processes["echo"].terminate_calls == 1

    async def test_exit_during_benchmark_does_not_override_result(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner()

        async def exit_then_report(request):
            spawner.processes["echo"].simulate_exit(1)
            return ECHO_RESULT

        orchestrator = make_orchestrator(
            spawner=spawner,
            load_generator=make_load_generator(side_effect=exit_then_report),
        )

        summary = await orchestrator.execute(candidates[:1])

        assert summary.outcomes["echo"].success
        assert spawner.processes["echo"].terminate_calls == 1


class TestInterrupt:
    async def test_interrupt_mid_benchmark(self, make_orchestrator, candidates):
        """Interrupting the first of three candidates tears it down and skips the rest."""
        spawner = FakeSpawner()
        cancelled = asyncio.Event()
        orchestrator: BenchmarkOrchestrator | None = None

        async def interrupt_during_load(request):
            asyncio.get_running_loop().call_soon(orchestrator.request_interrupt)
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        orchestrator = make_orchestrator(
            spawner=spawner,
            load_generator=make_load_generator(side_effect=interrupt_during_load),
        )

        start = time.perf_counter()
        summary = await orchestrator.execute(candidates)

        assert time.perf_counter() - start < 5.0
        assert summary.interrupted
        assert list(summary.outcomes) == ["echo"]
        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.INTERRUPTED
        assert outcome.phase == CandidatePhase.BENCHMARKING
        assert summary.untried == ["fast", "slow"]
        assert cancelled.is_set()
        assert list(spawner.processes) == ["echo"]
        assert spawner.processes["echo"].terminate_calls == 1
        assert not orchestrator.slot.occupied

    async def test_interrupt_during_cooldown(self, make_orchestrator, candidates):
        spawner = FakeSpawner()
        orchestrator = make_orchestrator(spawner=spawner, cooldown_seconds=30.0)
        asyncio.get_running_loop().call_later(0.2, orchestrator.request_interrupt)

        start = time.perf_counter()
        summary = await orchestrator.execute(candidates)

        assert time.perf_counter() - start < 5.0
        assert list(summary.outcomes) == ["echo"]
        assert summary.outcomes["echo"].success
        assert summary.untried == ["fast", "slow"]

    async def test_interrupt_before_execute_runs_nothing(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner()
        orchestrator = make_orchestrator(spawner=spawner)
        orchestrator.request_interrupt()

        summary = await orchestrator.execute(candidates)

        assert summary.outcomes == {}
        assert summary.untried == ["echo", "fast", "slow"]
        assert spawner.calls == []

    async def test_second_interrupt_is_ignored(self, make_orchestrator):
        orchestrator = make_orchestrator()
        orchestrator.request_interrupt()
        orchestrator.request_interrupt()
        assert orchestrator.interrupted


class TestInternalErrors:
    async def test_prober_crash_is_recorded_and_run_continues(
        self, make_orchestrator, candidates
    ):
        spawner = FakeSpawner()

        def crash_on_echo(endpoint):
            if endpoint[1] == 4000:
                raise RuntimeError("prober bug")

        orchestrator = make_orchestrator(
            spawner=spawner, prober=FakeProber(hook=crash_on_echo)
        )

        summary = await orchestrator.execute(candidates[:2])

        outcome = summary.outcomes["echo"]
        assert outcome.failure == FailureKind.INTERNAL_ERROR
        assert "prober bug" in outcome.error
        assert spawner.processes["echo"].terminate_calls == 1
        assert summary.outcomes["fast"].success

    async def test_occupied_slot_terminates_new_process(
        self, make_orchestrator, candidates
    ):
        slot = ActiveCandidateSlot()
        leftover = FakeProcess(candidates[2])
        slot.occupy(leftover)
        spawner = FakeSpawner()
        orchestrator = make_orchestrator(spawner=spawner, slot=slot)

        summary = await orchestrator.execute(candidates[:1])

        assert summary.outcomes["echo"].failure == FailureKind.INTERNAL_ERROR
        assert spawner.processes["echo"].terminate_calls == 1
        assert slot.current is leftover

    def test_duplicate_outcome_rejected(self, make_orchestrator):
        orchestrator = make_orchestrator()
        outcome = BenchmarkOutcome.failed("echo", FailureKind.LAUNCH_ERROR, "boom")
        orchestrator._record(outcome)
        with pytest.raises(DuplicateOutcomeError):
            orchestrator._record(outcome)
