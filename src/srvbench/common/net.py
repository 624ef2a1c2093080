# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Low-level socket helpers shared by the prober and the process launcher."""

import asyncio
import contextlib


async def tcp_connect(host: str, port: int, timeout: float) -> None:
    """Open and immediately close a TCP connection.

    Raises:
        OSError: If the connection is refused or otherwise fails.
        TimeoutError: If the connection is not established within timeout.
    """
    _, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port), timeout=timeout
    )
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()


async def is_port_in_use(host: str, port: int, timeout: float) -> bool:
    """Return True if something already accepts connections on host:port."""
    try:
        await tcp_connect(host, port, timeout)
    except (OSError, TimeoutError):
        return False
    return True


def http_url(host: str, port: int, path: str = "/") -> str:
    """Build ``http://host:port/path``, bracketing IPv6 literals."""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}{path}"
