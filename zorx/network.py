"""Outbound connectivity probe.

A single DNS lookup of a well-known hostname decides whether dependency
installation is worth attempting.  Resolution failures of any kind mean
"offline"; the probe never raises and never retries.
"""

from __future__ import annotations

import asyncio
import socket

PROBE_HOST = "google.com"


async def has_connectivity(host: str = PROBE_HOST, timeout: float = 5.0) -> bool:
    """Return ``True`` if *host* resolves within *timeout* seconds."""
    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(
            loop.getaddrinfo(host, None, type=socket.SOCK_STREAM), timeout=timeout
        )
    except (OSError, asyncio.TimeoutError, UnicodeError):
        return False
    return True
