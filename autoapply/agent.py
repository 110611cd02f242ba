"""
Indeed automation agent.

Runs: open results page → wait for readiness → scroll to end → scrape cards →
queue → drain (apply + autofill one job at a time) → track.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, Optional

from autoapply import learning
from autoapply.autofill import AnswerProvider
from autoapply.config import Settings
from autoapply.errors import AutomationStopped, ConfigConflict, ReadinessTimeout, StorageError
from autoapply.job_queue import JobQueue
from autoapply.log import get_logger
from autoapply.models import Configuration, JobRecord, LearnedPattern
from autoapply.page import PageAccessor
from autoapply.pagination import scroll_to_end
from autoapply.readiness import wait_for
from autoapply.scraper import scrape_page
from autoapply.store import ConfigStore, JsonStore
from autoapply.tracker import APPLICATIONS_CSV, get_processed_ids, record_result

log = get_logger(__name__)

BADGE_ID = "autoapply-status"

STARTING = "starting"
WAITING = "waiting"
SCROLLING = "scrolling"
SCRAPING = "scraping"
QUEUED = "queued"
APPLYING = "applying"
COMPLETED = "completed"
STOPPED = "stopped"
FAILED = "failed"

StatusCallback = Callable[[str, str], None]
Processor = Callable[[JobRecord], Awaitable[bool]]


def _log_status(status: str, timestamp: str) -> None:
    log.info("STATUS %s (%s)", status, timestamp)


class Agent:
    def __init__(
        self,
        settings: Settings,
        *,
        config_store: Optional[ConfigStore] = None,
        answer_provider: Optional[AnswerProvider] = None,
        on_status: Optional[StatusCallback] = None,
        tracker_path: Path = APPLICATIONS_CSV,
    ) -> None:
        self.settings = settings
        self.kv = JsonStore(settings.store_path)
        self.config_store = config_store or ConfigStore(self.kv)
        self.answer_provider = answer_provider
        self.on_status = on_status or _log_status
        self.tracker_path = tracker_path
        self.stop_event = asyncio.Event()
        self.status: Optional[str] = None
        self.config: Configuration = Configuration()
        self._page: Optional[PageAccessor] = None

    def stop(self) -> None:
        """Honoured at the next wait, scroll step or queue item."""
        if not self.stop_event.is_set():
            log.info("Stop requested")
            self.stop_event.set()

    async def _emit(self, status: str) -> None:
        self.status = status
        self.on_status(status, datetime.now(timezone.utc).isoformat())
        if self._page is None:
            return
        try:
            await self._page.set_control_text(BADGE_ID, f"autoapply: {status}")
        except Exception as exc:
            log.debug("Status badge not updated: %s", exc)

    def _record_result(self, job: JobRecord, status: str) -> None:
        try:
            record_result(job, status, self.tracker_path)
        except OSError as exc:
            log.warning("Could not track %s: %s", job.external_id, exc)

    def _save_learned(self, new_patterns: list[LearnedPattern]) -> None:
        """Persist learned patterns, reloading once if the store moved on."""
        if not new_patterns:
            return
        try:
            self.config_store.save(self.config)
            return
        except ConfigConflict:
            log.warning("Configuration changed on disk; merging learned answers")
        except StorageError as exc:
            log.warning("Learned answers kept in memory only: %s", exc)
            return
        try:
            fresh = self.config_store.load()
            for p in new_patterns:
                learning.record(p.question, p.value, p.input_kind, fresh, options=p.options)
            self.config_store.save(fresh)
            self.config = fresh
        except StorageError as exc:
            log.warning("Learned answers kept in memory only: %s", exc)

    def _new_jobs(self, jobs: list[JobRecord], pending: Iterable[JobRecord] = ()) -> list[JobRecord]:
        """Drop duplicates, tracked ids and ids already waiting in the queue."""
        try:
            done = get_processed_ids(self.tracker_path)
        except OSError as exc:
            log.warning("Tracker unreadable (%s); queueing every job", exc)
            done = set()
        seen = {job.external_id for job in pending}
        fresh: list[JobRecord] = []
        for job in jobs:
            if job.external_id in seen or job.external_id in done:
                continue
            seen.add(job.external_id)
            fresh.append(job)
        return fresh

    async def run_pipeline(self, page: PageAccessor, processor: Processor) -> dict[str, Any]:
        """Readiness → pagination → scrape → queue → drain on an open page."""
        s = self.settings
        summary: dict[str, Any] = {"jobs_found": 0, "queued": 0, "processed": 0, "failed": 0}
        try:
            await self._emit(WAITING)
            await wait_for(
                page, s.readiness_anchor, s.poll_interval,
                stop=self.stop_event, max_attempts=s.max_poll_attempts,
            )
            if await page.inject_control(s.readiness_anchor, BADGE_ID, "autoapply: ready"):
                self._page = page

            await self._emit(SCROLLING)
            await scroll_to_end(
                page, s.scroll_step, s.scroll_delay,
                tolerance=s.bottom_tolerance, stop=self.stop_event, max_steps=s.max_scroll_steps,
            )

            await self._emit(SCRAPING)
            jobs = scrape_page(await page.html(), page.url)
            summary["jobs_found"] = len(jobs)

            queue = JobQueue(
                processor,
                throttle=s.job_throttle,
                timeout=s.job_timeout,
                store=self.kv,
                on_result=self._record_result,
                stop=self.stop_event,
            )
            queue.restore()
            summary["queued"] = queue.enqueue(self._new_jobs(jobs, queue.pending))
            await self._emit(QUEUED)

            await self._emit(APPLYING)
            summary["processed"] = await queue.drain()
            summary["failed"] = len(queue.failed)
            await self._emit(STOPPED if self.stop_event.is_set() else COMPLETED)
        except AutomationStopped:
            await self._emit(STOPPED)
        except ReadinessTimeout as exc:
            log.error("Page never became ready: %s", exc)
            await self._emit(FAILED)
        summary["status"] = self.status
        return summary

    async def run(self) -> dict[str, Any]:
        """Launch a browser and run the whole pipeline against ``settings.url``."""
        self.config = self.config_store.load_or_default()
        await self._emit(STARTING)

        from playwright.async_api import async_playwright

        from autoapply.browser_apply import apply_to_job, open_page

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=self.settings.headless)
            context = await browser.new_context(viewport={"width": 1280, "height": 900})
            page = await context.new_page()

            async def process(job: JobRecord) -> bool:
                before = len(self.config.learned_data.patterns)
                ok, msg = await apply_to_job(context, job, self.config, self.answer_provider)
                self._save_learned(self.config.learned_data.patterns[before:])
                log.info("%s @ %s → %s", job.title, job.company_name, msg)
                return ok

            try:
                await open_page(page, self.settings.url)
                return await self.run_pipeline(PageAccessor(page), process)
            finally:
                await browser.close()
