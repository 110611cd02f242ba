"""Extract job records from the rendered results list.

Each card is a direct ``li`` child of the container's list. A card is kept
only when all seven fields are found; anything else is skipped and logged.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from autoapply.log import get_logger
from autoapply.models import JobRecord

log = get_logger(__name__)

# Browse page first, then the search results page.
CONTAINER_IDS: tuple[str, ...] = ("mosaic-provider-jobcards-1", "mosaic-jobResults")

TITLE = "h2.jobTitle span"
COMPANY = '[data-testid="company-name"]'
LOCATION = '[data-testid="text-location"]'
DESCRIPTION = ".jobMetaDataGroup"
LINK = "h2.jobTitle a"
APPLY_BADGE = '[data-testid="indeedApply"], .iaLabel'


def clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _text(card: Tag, selector: str) -> Optional[str]:
    el = card.select_one(selector)
    if el is None:
        return None
    return clean_text(el.get_text(" ", strip=True)) or None


def _link(card: Tag, base_url: str) -> tuple[Optional[str], Optional[str]]:
    anchor = card.select_one(LINK)
    if anchor is None:
        return None, None
    href = anchor.get("href")
    url = urljoin(base_url, href) if href else None
    job_id = anchor.get("data-jk") or anchor.get("id") or None
    return url, job_id


def extract_card(card: Tag, base_url: str = "") -> Optional[JobRecord]:
    """Build a JobRecord from one card, or None if any field is missing."""
    apply_url, external_id = _link(card, base_url)
    values = {
        "title": _text(card, TITLE),
        "company_name": _text(card, COMPANY),
        "location": _text(card, LOCATION),
        "company_description": _text(card, DESCRIPTION),
        "apply_url": apply_url,
        "external_id": external_id,
        "application_type": _text(card, APPLY_BADGE),
    }
    missing = [name for name, value in values.items() if not value]
    if missing:
        log.debug("Skipping card (%s): missing %s", values["title"] or "untitled", ", ".join(missing))
        return None
    return JobRecord(**values)


def card_nodes(container: Optional[Tag]) -> list[Tag]:
    if container is None:
        return []
    listing = container.find("ul")
    if listing is None:
        return []
    return listing.find_all("li", recursive=False)


def scrape(container: Optional[Tag], base_url: str = "") -> list[JobRecord]:
    """Complete records for the container's cards, in document order."""
    cards = card_nodes(container)
    jobs = [job for job in (extract_card(card, base_url) for card in cards) if job is not None]
    log.info("Scraped %d of %d card(s)", len(jobs), len(cards))
    return jobs


def find_container(soup: BeautifulSoup) -> Optional[Tag]:
    for container_id in CONTAINER_IDS:
        container = soup.find(id=container_id)
        if container is not None:
            return container
    return None


def scrape_page(html: str, base_url: str = "") -> list[JobRecord]:
    soup = BeautifulSoup(html, "html.parser")
    container = find_container(soup)
    if container is None:
        log.warning("No job card container on page")
        return []
    return scrape(container, base_url)
