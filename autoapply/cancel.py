"""Stop-aware sleeping shared by every polling loop."""
from __future__ import annotations

import asyncio


async def pause(seconds: float, stop: asyncio.Event | None = None) -> bool:
    """Sleep for ``seconds``; return True if ``stop`` was set meanwhile."""
    if stop is None:
        await asyncio.sleep(seconds)
        return False
    if stop.is_set():
        return True
    try:
        await asyncio.wait_for(stop.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True
