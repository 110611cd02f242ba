"""Thin async accessor over a Playwright page.

The scraping core only needs to test for selectors, read scroll metrics,
scroll, read the page source and maintain one injected status badge.
"""
from __future__ import annotations

from dataclasses import dataclass

_METRICS_JS = """() => ({
    scrollY: window.scrollY,
    viewportHeight: window.innerHeight,
    documentHeight: Math.max(document.body.scrollHeight, document.documentElement.scrollHeight),
})"""

_INJECT_JS = """([anchor, id, text]) => {
    const host = document.querySelector(anchor);
    if (!host) return false;
    let el = document.getElementById(id);
    if (!el) {
        el = document.createElement('span');
        el.id = id;
        el.style.cssText = 'margin-left:10px;padding:4px 8px;border-radius:5px;'
            + 'background:blue;color:white;font:12px sans-serif;';
        host.appendChild(el);
    }
    el.textContent = text;
    return true;
}"""

_SET_TEXT_JS = """([id, text]) => {
    const el = document.getElementById(id);
    if (el) el.textContent = text;
    return !!el;
}"""


@dataclass(frozen=True)
class ScrollMetrics:
    scroll_y: float
    viewport_height: float
    document_height: float

    @property
    def bottom(self) -> float:
        return self.scroll_y + self.viewport_height


class PageAccessor:
    def __init__(self, page) -> None:
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def exists(self, selector: str) -> bool:
        return await self.page.query_selector(selector) is not None

    async def scroll_by(self, px: int) -> None:
        await self.page.evaluate("(dy) => window.scrollBy(0, dy)", px)

    async def scroll_metrics(self) -> ScrollMetrics:
        data = await self.page.evaluate(_METRICS_JS)
        return ScrollMetrics(
            scroll_y=float(data["scrollY"]),
            viewport_height=float(data["viewportHeight"]),
            document_height=float(data["documentHeight"]),
        )

    async def html(self) -> str:
        return await self.page.content()

    async def inject_control(self, anchor: str, element_id: str, text: str) -> bool:
        """Add (or reuse) the status badge inside ``anchor``."""
        return bool(await self.page.evaluate(_INJECT_JS, [anchor, element_id, text]))

    async def set_control_text(self, element_id: str, text: str) -> bool:
        return bool(await self.page.evaluate(_SET_TEXT_JS, [element_id, text]))
