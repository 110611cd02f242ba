"""In-memory stand-ins for the Playwright page accessor."""
from __future__ import annotations

from typing import Optional

from autoapply.page import ScrollMetrics


class FakePage:
    def __init__(
        self,
        *,
        anchor_after: Optional[int] = 1,
        html: str = "",
        url: str = "https://www.indeed.com/jobs?q=python",
        document_height: float = 2000,
        viewport_height: float = 500,
        max_scroll: Optional[float] = None,
    ) -> None:
        self.anchor_after = anchor_after
        self.exists_calls = 0
        self._html = html
        self.url = url
        self.document_height = document_height
        self.viewport_height = viewport_height
        self.max_scroll = max_scroll
        self.scroll_y = 0.0
        self.scroll_calls = 0
        self.controls: dict[str, str] = {}

    async def exists(self, selector: str) -> bool:
        self.exists_calls += 1
        return self.anchor_after is not None and self.exists_calls >= self.anchor_after

    async def scroll_by(self, px: int) -> None:
        self.scroll_calls += 1
        limit = max(self.document_height - self.viewport_height, 0)
        if self.max_scroll is not None:
            limit = min(limit, self.max_scroll)
        self.scroll_y = min(self.scroll_y + px, limit)

    async def scroll_metrics(self) -> ScrollMetrics:
        return ScrollMetrics(self.scroll_y, self.viewport_height, self.document_height)

    async def html(self) -> str:
        return self._html

    async def inject_control(self, anchor: str, element_id: str, text: str) -> bool:
        self.controls[element_id] = text
        return True

    async def set_control_text(self, element_id: str, text: str) -> bool:
        if element_id not in self.controls:
            return False
        self.controls[element_id] = text
        return True


def card(
    jk: str = "a1",
    title: Optional[str] = "Software Engineer",
    company: Optional[str] = "Acme Corp",
    location: Optional[str] = "Dallas, TX",
    description: Optional[str] = "Full-time  Health insurance",
    badge: Optional[str] = "Easily apply",
    href: Optional[str] = None,
) -> str:
    href = href if href is not None else f"/rc/clk?jk={jk}"
    parts = ['<li><div class="cardOutline">']
    span = f"<span>{title}</span>" if title is not None else ""
    parts.append(f'<h2 class="jobTitle"><a href="{href}" data-jk="{jk}">{span}</a></h2>')
    if company is not None:
        parts.append(f'<span data-testid="company-name">{company}</span>')
    if location is not None:
        parts.append(f'<div data-testid="text-location">{location}</div>')
    if description is not None:
        parts.append(f'<div class="jobMetaDataGroup"><ul><li>{description}</li></ul></div>')
    if badge is not None:
        parts.append(f'<span data-testid="indeedApply">{badge}</span>')
    parts.append("</div></li>")
    return "".join(parts)


def results_page(*cards: str, container_id: str = "mosaic-provider-jobcards-1") -> str:
    return (
        "<html><body><div id=\"MosaicProviderRichSearchDaemon\"></div>"
        f"<div id=\"{container_id}\"><ul>{''.join(cards)}</ul></div></body></html>"
    )
