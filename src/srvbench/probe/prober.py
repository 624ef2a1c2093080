# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Layered readiness probe for candidate servers.

Two ordered checks with independent timeouts:
1. HTTP GET against the candidate's probe path. Any response means the server
   is benchmarkable; a status outside [200, 400) only logs a warning unless
   strict mode is on.
2. Only if step 1 gets no HTTP answer (refused, reset, timed out, malformed):
   a raw TCP connect. A server that accepts connections but is not yet
   routing HTTP is still worth benchmarking, since the load generator only
   needs a reachable socket.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from srvbench.common.enums import ProbeStatus
from srvbench.common.environment import Environment
from srvbench.common.logging import SrvBenchLoggerMixin
from srvbench.common.net import http_url, tcp_connect

__all__ = [
    "ProbeVerdict",
    "ReadinessProber",
]


@dataclass(frozen=True, slots=True)
class ProbeVerdict:
    """Result of a readiness probe."""

    status: ProbeStatus
    http_status: int | None = None
    error: BaseException | None = None
    warning: str | None = None

    @property
    def proceed(self) -> bool:
        """Whether the candidate should move on to benchmarking."""
        return self.status in (ProbeStatus.READY, ProbeStatus.REACHABLE_NOT_HTTP)

    def describe(self) -> str:
        if self.status == ProbeStatus.READY:
            text = f"ready (HTTP {self.http_status})" if self.http_status else "ready"
            return f"{text}, {self.warning}" if self.warning else text
        if self.status == ProbeStatus.REACHABLE_NOT_HTTP:
            return f"reachable but not answering HTTP ({self.error!r})"
        if self.error is None:
            return f"unreachable ({self.warning})"
        return f"unreachable ({self.error!r})"


class ReadinessProber(SrvBenchLoggerMixin):
    """Decides whether a candidate endpoint is ready to be benchmarked.

    Args:
        strict_http_status: Treat an HTTP status outside [200, 400) as
            UNREACHABLE rather than READY-with-warning.
        client: Optional pre-built httpx client (tests). A fresh client is
            created per probe otherwise, so no connection outlives the probe.
    """

    def __init__(
        self,
        strict_http_status: bool = False,
        client: httpx.AsyncClient | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.strict_http_status = strict_http_status
        self._client = client

    async def probe(
        self,
        endpoint: tuple[str, int],
        http_timeout: float,
        socket_timeout: float,
        path: str = "/",
    ) -> ProbeVerdict:
        """HTTP check, with a TCP connect fallback when no HTTP answer arrives."""
        host, port = endpoint
        url = http_url(host, port, path)

        try:
            status_code = await self._http_get(url, http_timeout)
        except httpx.TooManyRedirects:
            warning = f"too many redirects from {url}"
            self.warning(f"{warning}; benchmarking anyway")
            return ProbeVerdict(ProbeStatus.READY, warning=warning)
        except (httpx.HTTPError, httpx.InvalidURL) as http_error:
            self.debug(f"HTTP probe of {url} failed: {http_error!r}; trying TCP connect")
            return await self._socket_check(host, port, socket_timeout, http_error)

        if 200 <= status_code < 400:
            return ProbeVerdict(ProbeStatus.READY, http_status=status_code)

        warning = f"unexpected HTTP {status_code} from {url}"
        if self.strict_http_status:
            self.warning(f"{warning}; strict mode treats this as unreachable")
            return ProbeVerdict(
                ProbeStatus.UNREACHABLE,
                http_status=status_code,
                warning=warning,
            )
        self.warning(f"{warning}; benchmarking anyway")
        return ProbeVerdict(ProbeStatus.READY, http_status=status_code, warning=warning)

    async def probe_until_ready(
        self,
        endpoint: tuple[str, int],
        http_timeout: float,
        socket_timeout: float,
        path: str = "/",
        attempts: int = 1,
        retry_interval: float = 0.0,
    ) -> ProbeVerdict:
        """Probe up to ``attempts`` times, retrying only while UNREACHABLE."""
        verdict = await self.probe(endpoint, http_timeout, socket_timeout, path)
        for attempt in range(2, attempts + 1):
            if verdict.proceed:
                break
            self.debug(
                f"{endpoint[0]}:{endpoint[1]} unreachable, retry {attempt}/{attempts} "
                f"in {retry_interval}s"
            )
            await asyncio.sleep(retry_interval)
            verdict = await self.probe(endpoint, http_timeout, socket_timeout, path)
        return verdict

    async def _http_get(self, url: str, timeout: float) -> int:
        headers = {"User-Agent": Environment.PROBE.USER_AGENT}
        if self._client is not None:
            return await self._fetch(self._client, url, timeout, headers)
        async with httpx.AsyncClient(
            follow_redirects=Environment.PROBE.FOLLOW_REDIRECTS, trust_env=False
        ) as client:
            return await self._fetch(client, url, timeout, headers)

    @staticmethod
    async def _fetch(
        client: httpx.AsyncClient, url: str, timeout: float, headers: dict[str, str]
    ) -> int:
        # timeout bounds the whole exchange including the body, not each read.
        # The body is drained undecoded: a broken Content-Encoding is still an answer.
        try:
            async with asyncio.timeout(timeout):
                async with client.stream(
                    "GET", url, headers=headers, timeout=timeout
                ) as response:
                    async for _ in response.aiter_raw():
                        pass
        except TimeoutError as e:
            raise httpx.TimeoutException(f"No complete response within {timeout}s") from e
        return response.status_code

    async def _socket_check(
        self,
        host: str,
        port: int,
        timeout: float,
        http_error: Exception,
    ) -> ProbeVerdict:
        try:
            await tcp_connect(host, port, timeout)
        except (OSError, TimeoutError) as socket_error:
            socket_error.__cause__ = http_error
            return ProbeVerdict(ProbeStatus.UNREACHABLE, error=socket_error)
        return ProbeVerdict(ProbeStatus.REACHABLE_NOT_HTTP, error=http_error)
