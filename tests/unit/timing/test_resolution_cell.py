# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for ResolutionCell."""

import asyncio

from srvbench.timing import ResolutionCell


class TestResolutionCell:
    async def test_first_writer_wins(self):
        cell: ResolutionCell[str] = ResolutionCell(owner="echo")
        assert cell.try_resolve("timeout", "probe_timer") is True
        assert cell.try_resolve("ready", "probe") is False
        assert cell.try_resolve("interrupted", "interrupt") is False

        assert cell.value == "timeout"
        assert cell.source == "probe_timer"
        assert cell.ignored_sources == ["probe", "interrupt"]

    async def test_unresolved_state(self):
        cell: ResolutionCell[int] = ResolutionCell()
        assert not cell.resolved
        assert cell.value is None
        assert cell.source is None

    async def test_wait_returns_value(self):
        cell: ResolutionCell[int] = ResolutionCell()
        waiter = asyncio.create_task(cell.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        cell.try_resolve(42, "benchmark")
        assert await asyncio.wait_for(waiter, timeout=1.0) == 42

    async def test_wait_after_resolution(self):
        cell: ResolutionCell[int] = ResolutionCell()
        cell.try_resolve(1, "spawn")
        assert await cell.wait() == 1
