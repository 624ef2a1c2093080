# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
import sys
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel

SETUP_FAILURE_EXIT_CODE = 1


def raise_startup_error_and_exit(
    message: str,
    title: str = "SrvBench Startup Error",
    exit_code: int = SETUP_FAILURE_EXIT_CODE,
) -> NoReturn:
    """Print a setup failure to stderr and exit before any candidate is started."""
    console = Console(stderr=True)
    console.print(Panel(message, title=title, border_style="red", expand=False))
    sys.exit(exit_code)
