"""FIFO apply queue drained one job at a time with a fixed throttle."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Optional

from autoapply.cancel import pause
from autoapply.config import QUEUE_KEY
from autoapply.errors import StorageError
from autoapply.log import get_logger
from autoapply.models import JobRecord, QueueItem
from autoapply.store import JsonStore

log = get_logger(__name__)

Processor = Callable[[JobRecord], Awaitable[bool]]
ResultCallback = Callable[[JobRecord, str], None]

PENDING = "pending"
PROCESSING = "processing"
PASS = "pass"
FAIL = "fail"
FAIL_TIMEOUT = "fail_timeout"
FAIL_ERROR = "fail_error"


class JobQueue:
    """Queue owned by one pipeline; at most one ``drain`` runs at a time.

    Jobs enqueued while a drain is running are picked up by that drain.
    """

    def __init__(
        self,
        processor: Processor,
        *,
        throttle: float = 2.0,
        timeout: float = 30.0,
        store: Optional[JsonStore] = None,
        on_result: Optional[ResultCallback] = None,
        stop: Optional[asyncio.Event] = None,
    ) -> None:
        self.processor = processor
        self.throttle = throttle
        self.timeout = timeout
        self.store = store
        self.on_result = on_result
        self.stop = stop
        self.failed: list[QueueItem] = []
        self.draining = False
        self._items: list[QueueItem] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def pending(self) -> list[JobRecord]:
        return [item.job for item in self._items]

    def enqueue(self, jobs: Iterable[JobRecord]) -> int:
        """Append ``jobs`` to the tail; return the new queue length."""
        added = [QueueItem(job) for job in jobs]
        self._items.extend(added)
        log.info("Queued %d job(s), %d pending, %d failed", len(added), len(self._items), len(self.failed))
        self._persist()
        return len(self._items)

    def restore(self) -> int:
        """Reload jobs left over from an interrupted run."""
        if self.store is None:
            return 0
        try:
            state = self.store.get(QUEUE_KEY) or {}
        except StorageError as exc:
            log.warning("Could not restore queue state: %s", exc)
            return 0
        restored = [QueueItem.from_dict(d) for d in state.get("pending", [])]
        for item in restored:
            item.status = PENDING
        self._items.extend(restored)
        self.failed.extend(QueueItem.from_dict(d) for d in state.get("failed", []))
        if restored:
            log.info("Restored %d pending job(s) from the previous run", len(restored))
        return len(restored)

    async def drain(self) -> int:
        """Process jobs head-first until the queue is empty or stopped.

        Returns the number of jobs processed by this call; a call made while
        another drain is active returns 0 immediately.
        """
        if self.draining:
            log.warning("Drain already running; ignoring second request")
            return 0
        self.draining = True
        processed = 0
        try:
            while self._items:
                if self.stop is not None and self.stop.is_set():
                    log.info("Queue stopped with %d job(s) pending", len(self._items))
                    break
                item = self._items[0]
                item.status = PROCESSING
                log.info("Processing %s @ %s", item.job.title, item.job.company_name)
                item.status = await self._run(item.job)
                if item.status != PASS:
                    self.failed.append(item)
                if self.on_result is not None:
                    self.on_result(item.job, item.status)
                processed += 1

                stopped = await pause(self.throttle, self.stop)
                self._items.pop(0)
                self._persist()
                if stopped:
                    log.info("Queue stopped with %d job(s) pending", len(self._items))
                    break
        finally:
            self.draining = False

        if not self._items:
            log.info("All jobs processed, %d failed", len(self.failed))
            self._clear_state()
        return processed

    async def _run(self, job: JobRecord) -> str:
        try:
            ok = await asyncio.wait_for(self.processor(job), timeout=self.timeout)
        except asyncio.TimeoutError:
            log.warning("Job timed out after %.0fs: %s", self.timeout, job.external_id)
            return FAIL_TIMEOUT
        except Exception as exc:
            log.error("Job %s failed: %s", job.external_id, str(exc)[:150])
            return FAIL_ERROR
        return PASS if ok else FAIL

    def _persist(self) -> None:
        if self.store is None:
            return
        state = {
            "pending": [item.to_dict() for item in self._items],
            "failed": [item.to_dict() for item in self.failed],
        }
        try:
            self.store.set(QUEUE_KEY, state)
        except StorageError as exc:
            log.warning("Could not save queue state: %s", exc)

    def _clear_state(self) -> None:
        if self.store is None:
            return
        try:
            self.store.remove(QUEUE_KEY)
        except StorageError as exc:
            log.warning("Could not clear queue state: %s", exc)
