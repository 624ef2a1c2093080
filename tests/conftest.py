# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for SrvBench tests."""

import asyncio
import socket
import sys
from collections.abc import Callable

import pytest

from srvbench.common.config import BenchmarkConfig, CandidateDescriptor


@pytest.fixture
def unused_port() -> int:
    """A TCP port on 127.0.0.1 that nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def make_candidate(unused_port) -> Callable[..., CandidateDescriptor]:
    """Factory for candidate descriptors; defaults to a sleeping Python child."""

    def _make(name: str = "echo", **overrides) -> CandidateDescriptor:
        fields = {
            "name": name,
            "port": unused_port,
            "command": [sys.executable, "-c", "import time; time.sleep(30)"],
        }
        fields.update(overrides)
        if "script" in overrides:
            fields.pop("command")
        return CandidateDescriptor(**fields)

    return _make


@pytest.fixture
def fast_config() -> BenchmarkConfig:
    """Config with short phase budgets so orchestrator tests finish quickly."""
    return BenchmarkConfig(
        duration=1,
        connections=10,
        pipelining=1,
        start_delay=0.0,
        http_timeout=0.2,
        socket_timeout=0.2,
        probe_timeout=2.0,
        benchmark_timeout=5.0,
        termination_grace_period=0.5,
        kill_timeout=0.5,
    )


@pytest.fixture
async def http_server():
    """Start a minimal HTTP/1.1 server answering every request with a fixed status.

    Usage: ``port = await http_server(status=200, headers={...})``.
    """
    servers: list[asyncio.Server] = []

    async def _start(
        status: int = 200, body: bytes = b"ok", headers: dict[str, str] | None = None
    ) -> int:
        extra = "".join(f"{k}: {v}\r\n" for k, v in (headers or {}).items())

        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                f"HTTP/1.1 {status} Status\r\n"
                f"Content-Length: {len(body)}\r\n"
                f"{extra}"
                "Connection: close\r\n\r\n".encode()
                + body
            )
            await writer.drain()
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield _start

    for server in servers:
        server.close()
        await server.wait_closed()


@pytest.fixture
async def tcp_only_server():
    """Start a server that accepts TCP connections but never speaks HTTP.

    ``port = await tcp_only_server(hang=False)`` closes each connection at
    once; ``hang=True`` keeps it open without replying.
    """
    servers: list[asyncio.Server] = []
    writers: list[asyncio.StreamWriter] = []

    async def _start(hang: bool = False) -> int:
        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
            if hang:
                writers.append(writer)
                return
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield _start

    for writer in writers:
        writer.close()
    for server in servers:
        server.close()
        await server.wait_closed()
