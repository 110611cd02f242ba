"""Wait until the page has rendered its readiness anchor."""
from __future__ import annotations

import asyncio
from typing import Optional

from autoapply.cancel import pause
from autoapply.errors import AutomationStopped, ReadinessTimeout
from autoapply.log import get_logger
from autoapply.page import PageAccessor

log = get_logger(__name__)


async def wait_for(
    page: PageAccessor,
    selector: str,
    poll_interval: float = 0.1,
    *,
    stop: Optional[asyncio.Event] = None,
    max_attempts: Optional[int] = None,
) -> int:
    """Poll at a fixed interval until ``selector`` exists; return the attempts used.

    Without ``max_attempts`` this waits indefinitely. Raises ReadinessTimeout
    once the attempts run out and AutomationStopped when ``stop`` is set.
    """
    attempts = 0
    while True:
        if stop is not None and stop.is_set():
            raise AutomationStopped(f"stopped while waiting for {selector!r}")
        attempts += 1
        if await page.exists(selector):
            log.debug("%s present after %d attempt(s)", selector, attempts)
            return attempts
        if max_attempts is not None and attempts >= max_attempts:
            raise ReadinessTimeout(selector, attempts)
        if await pause(poll_interval, stop):
            raise AutomationStopped(f"stopped while waiting for {selector!r}")
