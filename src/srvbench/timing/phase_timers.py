# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Named, independently cancellable timers guarding each candidate phase.

Every timer that guards a phase must be cancelled as soon as that phase's
real outcome is known. A timer that fires late would otherwise try to
resolve a candidate that has already moved on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from srvbench.common.logging import SrvBenchLoggerMixin

__all__ = [
    "PhaseTimer",
    "PhaseTimerSet",
]


class PhaseTimer:
    """A one-shot timer around ``loop.call_later``."""

    def __init__(
        self,
        name: str,
        delay: float,
        callback: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.name = name
        self.delay = delay
        self._callback = callback
        self._fired = False
        self._cancelled = False
        loop = loop or asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire)

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._fired or self._cancelled)

    def cancel(self) -> bool:
        """Cancel the timer. Returns True only if this call prevented it firing."""
        if not self.active:
            return False
        self._cancelled = True
        self._handle.cancel()
        return True

    def fire_now(self) -> None:
        """Run the callback immediately, as if the delay had elapsed."""
        if not self.active:
            return
        self._handle.cancel()
        self._fire()

    def _fire(self) -> None:
        if not self.active:
            return
        self._fired = True
        self._callback()


class PhaseTimerSet(SrvBenchLoggerMixin):
    """The timers of one candidate, keyed by phase name."""

    def __init__(self, owner: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.owner = owner
        self._timers: dict[str, PhaseTimer] = {}
        self._sleepers: dict[str, asyncio.Future[None]] = {}

    @property
    def active_names(self) -> list[str]:
        return [name for name, timer in self._timers.items() if timer.active]

    def get(self, name: str) -> PhaseTimer | None:
        return self._timers.get(name)

    def start(
        self, name: str, delay: float, callback: Callable[[], None]
    ) -> PhaseTimer:
        """Arm a timer. Re-using a name cancels the previous timer of that name."""
        self.cancel(name)
        timer = PhaseTimer(name, delay, callback)
        self._timers[name] = timer
        if self.is_trace_enabled:
            self.trace(f"[{self.owner}] armed '{name}' timer for {delay}s")
        return timer

    def cancel(self, name: str) -> bool:
        """Cancel the named timer (and wake its sleeper, if any)."""
        cancelled = False
        timer = self._timers.get(name)
        if timer is not None:
            cancelled = timer.cancel()
        sleeper = self._sleepers.pop(name, None)
        if sleeper is not None and not sleeper.done():
            sleeper.cancel()
        if cancelled and self.is_trace_enabled:
            self.trace(f"[{self.owner}] cancelled '{name}' timer")
        return cancelled

    def cancel_all(self) -> list[str]:
        """Cancel every pending timer. Returns the names that were still active."""
        names = self.active_names
        for name in list(self._timers) + list(self._sleepers):
            self.cancel(name)
        return names

    async def sleep(self, name: str, delay: float) -> None:
        """Wait for ``delay`` seconds on a named, cancellable timer.

        Raises:
            asyncio.CancelledError: If the timer is cancelled before it elapses.
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def _wake() -> None:
            if not waiter.done():
                waiter.set_result(None)

        self.start(name, delay, _wake)
        self._sleepers[name] = waiter
        try:
            await waiter
        finally:
            if self._sleepers.get(name) is waiter:
                del self._sleepers[name]
