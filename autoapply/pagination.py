"""Scroll an infinite-scroll results page until no more content appears."""
from __future__ import annotations

import asyncio
from typing import Optional

from autoapply.cancel import pause
from autoapply.log import get_logger
from autoapply.page import PageAccessor

log = get_logger(__name__)


async def scroll_to_end(
    page: PageAccessor,
    step_px: int = 400,
    step_delay: float = 0.08,
    *,
    tolerance: int = 5,
    stop: Optional[asyncio.Event] = None,
    max_steps: Optional[int] = None,
) -> int:
    """Scroll by ``step_px`` per step; return the number of steps taken.

    Ends when the viewport bottom is within ``tolerance`` px of the document
    height, when the scroll position stops changing between two steps, when
    ``max_steps`` is reached or when ``stop`` is set.
    """
    previous = (await page.scroll_metrics()).scroll_y
    steps = 0
    while True:
        if stop is not None and stop.is_set():
            log.info("Scrolling stopped after %d step(s)", steps)
            return steps
        await page.scroll_by(step_px)
        steps += 1
        if await pause(step_delay, stop):
            log.info("Scrolling stopped after %d step(s)", steps)
            return steps

        metrics = await page.scroll_metrics()
        if metrics.bottom >= metrics.document_height - tolerance:
            log.debug("Reached page bottom after %d step(s)", steps)
            return steps
        if metrics.scroll_y == previous:
            log.debug("Scroll position stalled at %.0f after %d step(s)", previous, steps)
            return steps
        previous = metrics.scroll_y
        if max_steps is not None and steps >= max_steps:
            log.warning("Stopped scrolling at max_steps=%d", max_steps)
            return steps
