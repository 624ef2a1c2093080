# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
from cyclopts import Group


class Groups:
    """Help-screen groups for CLI options, in display order."""

    LOAD_GENERATOR = Group.create_ordered("Load Generator")
    TIMEOUTS = Group.create_ordered("Timeouts")
    PROCESS = Group.create_ordered("Process")
    OUTPUT = Group.create_ordered("Output")
