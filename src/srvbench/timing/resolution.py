# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Single-assignment cell holding a candidate's final outcome.

Probe results, phase timers, process-exit notifications, benchmark completion
and operator interrupts all race to resolve the same candidate. Every one of
them goes through ``try_resolve``; the first write wins and the rest are
ignored.
"""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

from srvbench.common.logging import SrvBenchLoggerMixin

__all__ = [
    "ResolutionCell",
]

T = TypeVar("T")


class ResolutionCell(SrvBenchLoggerMixin, Generic[T]):
    def __init__(self, owner: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.owner = owner
        self._value: T | None = None
        self._source: str | None = None
        self._event = asyncio.Event()
        self._ignored: list[str] = []

    @property
    def resolved(self) -> bool:
        return self._event.is_set()

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def source(self) -> str | None:
        """Which resolution path won (e.g. "probe_timer", "process_exit")."""
        return self._source

    @property
    def ignored_sources(self) -> list[str]:
        """Resolution paths that arrived after the cell was already resolved."""
        return list(self._ignored)

    def try_resolve(self, value: T, source: str) -> bool:
        """Store value if the cell is still empty. Returns True if this call won."""
        if self._event.is_set():
            self._ignored.append(source)
            self.debug(
                f"[{self.owner}] ignoring late resolution from {source} "
                f"(already resolved by {self._source})"
            )
            return False
        self._value = value
        self._source = source
        self._event.set()
        return True

    async def wait(self) -> T:
        await self._event.wait()
        return self._value
