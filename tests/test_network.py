"""Unit tests for the connectivity probe (zorx.network)."""

from __future__ import annotations

import asyncio
import socket

import pytest

from zorx.network import PROBE_HOST, has_connectivity

pytestmark = pytest.mark.unit


@pytest.fixture
def resolver(monkeypatch: pytest.MonkeyPatch):
    """Replace the running loop's ``getaddrinfo`` with a scripted one."""

    def install(behaviour):
        calls: list[str] = []

        async def fake_getaddrinfo(host, port, **kwargs):
            calls.append(host)
            return await behaviour()

        monkeypatch.setattr(asyncio.get_running_loop(), "getaddrinfo", fake_getaddrinfo)
        return calls

    return install


@pytest.mark.asyncio
async def test_resolvable_host_means_online(resolver):
    async def ok():
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("142.250.0.1", 0))]

    calls = resolver(ok)
    assert await has_connectivity() is True
    assert calls == [PROBE_HOST]


@pytest.mark.asyncio
async def test_dns_failure_means_offline(resolver):
    async def fail():
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    calls = resolver(fail)
    assert await has_connectivity() is False
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_network_down_means_offline(resolver):
    async def fail():
        raise OSError(101, "Network is unreachable")

    resolver(fail)
    assert await has_connectivity() is False


@pytest.mark.asyncio
async def test_slow_resolution_times_out(resolver):
    async def hang():
        await asyncio.sleep(30)

    resolver(hang)
    assert await has_connectivity(timeout=0.1) is False


@pytest.mark.asyncio
async def test_invalid_tld_never_resolves():
    assert await has_connectivity("zorx-probe.invalid", timeout=5) is False
