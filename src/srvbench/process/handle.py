# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Uniform handle around a running candidate process.

Candidates come in two flavors:
- Directly spawned scripts (``script`` in the registry), signalled as a single process.
- External commands (``external: true``), started in their own session so that
  termination reaches every process the candidate forked.
"""

from __future__ import annotations

import asyncio
import os
import signal
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from srvbench.common.config import CandidateDescriptor
from srvbench.common.environment import Environment
from srvbench.common.exceptions import LaunchError
from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.common.net import is_port_in_use

__all__ = [
    "ExitListener",
    "ProcessExit",
    "RunningProcess",
    "spawn",
    "terminate",
]


@dataclass(frozen=True, slots=True)
class ProcessExit:
    """How a candidate process ended. Exactly one of the fields is set."""

    exit_code: int | None
    signal: str | None

    @classmethod
    def from_returncode(cls, returncode: int) -> ProcessExit:
        # asyncio reports death-by-signal as a negative return code
        if returncode < 0:
            try:
                name = signal.Signals(-returncode).name
            except ValueError:
                name = f"SIG{-returncode}"
            return cls(exit_code=None, signal=name)
        return cls(exit_code=returncode, signal=None)

    @property
    def is_failure(self) -> bool:
        """A non-null, non-zero exit code. Signal deaths are not failures here."""
        return self.exit_code is not None and self.exit_code != 0

    def describe(self) -> str:
        if self.signal is not None:
            return f"killed by {self.signal}"
        return f"exit code {self.exit_code}"


ExitListener = Callable[[ProcessExit], None]


class RunningProcess(SrvBenchLoggerMixin):
    """A spawned candidate process owned by the orchestrator.

    A background task waits for the process and, once it exits, records the
    ProcessExit and notifies every registered listener. The handle is
    invalidated (``pid`` becomes None) after termination is confirmed.
    """

    def __init__(
        self,
        descriptor: CandidateDescriptor,
        process: asyncio.subprocess.Process,
        log_file: IO[bytes] | None = None,
        log_path: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.descriptor = descriptor
        self.log_path = log_path
        self._process = process
        self._log_file = log_file
        self._pid: int | None = process.pid
        self._exit_status: ProcessExit | None = None
        self._listeners: list[ExitListener] = []
        self._watcher = asyncio.create_task(
            self._watch_exit(), name=f"exit-watcher-{descriptor.name}"
        )

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def pid(self) -> int | None:
        """Process id, or None once the handle has been invalidated."""
        return self._pid

    @property
    def exited(self) -> bool:
        return self._exit_status is not None

    @property
    def exit_status(self) -> ProcessExit | None:
        return self._exit_status

    @property
    def is_group_leader(self) -> bool:
        return self.descriptor.external

    def add_exit_listener(self, listener: ExitListener) -> None:
        """Register a callback run once when the process exits.

        If the process has already exited, the callback is scheduled right away.
        """
        if self._exit_status is not None:
            asyncio.get_running_loop().call_soon(listener, self._exit_status)
            return
        self._listeners.append(listener)

    async def wait(self, timeout: float | None = None) -> ProcessExit | None:
        """Wait for the process to exit. Returns None if timeout elapses first."""
        if self._watcher.done():
            return self._exit_status
        try:
            await asyncio.wait_for(asyncio.shield(self._watcher), timeout=timeout)
        except TimeoutError:
            return None
        return self._exit_status

    def send_signal(self, sig: signal.Signals) -> bool:
        """Signal the process (or its whole group for external candidates).

        Returns False if there was nothing left to signal.
        """
        if self._pid is None:
            return False
        try:
            if self.is_group_leader:
                os.killpg(self._pid, sig)
            else:
                self._process.send_signal(sig)
        except ProcessLookupError:
            return False
        self.debug(f"Sent {sig.name} to {self.name} (pid {self._pid})")
        return True

    async def terminate(self, grace_period: float, kill_timeout: float) -> None:
        """Stop the process: SIGTERM, bounded wait, then unconditional SIGKILL.

        Idempotent. For an already-exited process this only sweeps up any
        leftover members of an external candidate's process group.
        """
        if self._pid is None:
            return

        if self.exited:
            if self.is_group_leader:
                # Children of an external candidate can outlive the leader
                self.send_signal(signal.SIGKILL)
            self.debug(
                f"{self.name} already exited ({self._exit_status.describe()}); "
                "nothing to terminate"
            )
            self._invalidate()
            return

        self.info(f"Stopping {self.name} (pid {self._pid})")
        self.send_signal(signal.SIGTERM)
        if await self.wait(grace_period) is None:
            self.warning(
                f"{self.name} did not exit within {grace_period}s of SIGTERM; killing"
            )
            self.send_signal(signal.SIGKILL)
            if await self.wait(kill_timeout) is None:
                self.error(
                    f"{self.name} (pid {self._pid}) still not reaped {kill_timeout}s "
                    "after SIGKILL; abandoning the handle"
                )
        elif self.is_group_leader:
            self.send_signal(signal.SIGKILL)
        self._invalidate()

    def _invalidate(self) -> None:
        self._pid = None
        if not self._watcher.done():
            self._watcher.cancel()
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

    async def _watch_exit(self) -> None:
        returncode = await self._process.wait()
        self._exit_status = ProcessExit.from_returncode(returncode)
        self.debug(f"{self.name} exited: {self._exit_status.describe()}")
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            try:
                listener(self._exit_status)
            except Exception:
                self.exception(f"Exit listener for {self.name} failed")


def _build_env(descriptor: CandidateDescriptor) -> dict[str, str]:
    env = dict(os.environ) if Environment.PROCESS.INHERIT_ENV else {}
    env["SRVBENCH_HOST"] = descriptor.host
    env["SRVBENCH_PORT"] = str(descriptor.port)
    env.update(descriptor.env)
    return env


async def spawn(
    descriptor: CandidateDescriptor,
    *,
    log_dir: Path | None = None,
    check_port_free: bool = False,
) -> RunningProcess:
    """Start a candidate process.

    Args:
        descriptor: Candidate to launch
        log_dir: Directory that receives ``<name>.log`` with the candidate's
            stdout and stderr. Output is discarded when None.
        check_port_free: Refuse to launch if the candidate's port already
            accepts connections (another server would answer the probes).

    Raises:
        LaunchError: If the process could not be created.
    """
    if check_port_free and await is_port_in_use(
        descriptor.host, descriptor.port, Environment.PROCESS.PORT_CHECK_TIMEOUT
    ):
        raise LaunchError(
            descriptor.name,
            f"port {descriptor.port} on {descriptor.host} is already in use",
        )

    log_file: IO[bytes] | None = None
    log_path: Path | None = None
    if log_dir is not None:
        log_path = Path(log_dir) / f"{descriptor.name}.log"
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            log_file = log_path.open("wb")
        except OSError as e:
            raise LaunchError(
                descriptor.name, f"cannot open log file {log_path}: {e}"
            ) from e

    argv = descriptor.launch_argv
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=log_file if log_file is not None else asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.STDOUT
            if log_file is not None
            else asyncio.subprocess.DEVNULL,
            cwd=descriptor.cwd,
            env=_build_env(descriptor),
            start_new_session=descriptor.external,
        )
    except (OSError, ValueError) as e:
        if log_file is not None:
            log_file.close()
        raise LaunchError(
            descriptor.name, f"failed to start {' '.join(argv)!r}: {e}"
        ) from e

    return RunningProcess(descriptor, process, log_file=log_file, log_path=log_path)


async def terminate(
    process: RunningProcess | None,
    *,
    grace_period: float,
    kill_timeout: float,
) -> None:
    """Terminate a candidate. A no-op for None or already-invalidated handles."""
    if process is None:
        return
    await process.terminate(grace_period, kill_timeout)
