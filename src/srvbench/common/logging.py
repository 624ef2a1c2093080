# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Logging setup and the logger mixin used by SrvBench classes."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from srvbench.common.environment import Environment

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LOG_FORMAT_FILE = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_rich_logging(
    level: str | int | None = None,
    log_file: Path | None = None,
    console: Console | None = None,
) -> None:
    """Configure the root logger with a rich console handler.

    Replaces any handlers installed by a previous call so this can be invoked
    more than once (tests, repeated CLI invocations in one process).

    Args:
        level: Log level name or number. Defaults to Environment.LOGGING.LEVEL.
        log_file: Optional file that receives a plain-text copy of every record.
        console: Console to render to. Defaults to stderr.
    """
    if level is None:
        level = Environment.LOGGING.LEVEL
    if isinstance(level, str):
        level = TRACE if level.upper() == "TRACE" else level.upper()

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=Environment.LOGGING.RICH_TRACEBACKS,
        show_path=Environment.LOGGING.SHOW_PATH,
        log_time_format="%H:%M:%S",
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(rich_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT_FILE))
        root.addHandler(file_handler)

    root.setLevel(level)
    # httpx logs every request at INFO, which drowns out probe verdicts
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class SrvBenchLoggerMixin:
    """Gives a class `self.debug()`, `self.info()`, ... bound to its own logger.

    The logger name defaults to the class's module so records can be filtered
    per subsystem. Pass `logger_name` to override.
    """

    def __init__(self, logger_name: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.logger = logging.getLogger(logger_name or self.__class__.__module__)

    @property
    def is_trace_enabled(self) -> bool:
        return self.logger.isEnabledFor(TRACE)

    @property
    def is_debug_enabled(self) -> bool:
        return self.logger.isEnabledFor(logging.DEBUG)

    def trace(self, msg: str) -> None:
        self.logger.log(TRACE, msg)

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)

    def exception(self, msg: str) -> None:
        self.logger.exception(msg)
