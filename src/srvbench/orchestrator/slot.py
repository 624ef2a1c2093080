# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from srvbench.common.exceptions import SlotOccupiedError
from srvbench.process import RunningProcess


class ActiveCandidateSlot:
    """Holds the single candidate process that may be alive at any moment."""

    def __init__(self) -> None:
        self._process: RunningProcess | None = None

    @property
    def current(self) -> RunningProcess | None:
        return self._process

    @property
    def occupied(self) -> bool:
        return self._process is not None

    def occupy(self, process: RunningProcess) -> None:
        if self._process is not None:
            raise SlotOccupiedError(
                f"Cannot start {process.name}: {self._process.name} is still running"
            )
        self._process = process

    def release(self) -> RunningProcess | None:
        """Empty the slot, returning the process that was in it."""
        process, self._process = self._process, None
        return process
