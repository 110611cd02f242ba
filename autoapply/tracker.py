"""Track processed jobs in a structured table (CSV) with file locking."""
from __future__ import annotations

import csv
import fcntl
from datetime import datetime, timezone
from pathlib import Path

from autoapply.config import DATA_DIR
from autoapply.log import get_logger
from autoapply.models import JobRecord

log = get_logger(__name__)

APPLICATIONS_CSV: Path = DATA_DIR / "applications.csv"
HEADERS: list[str] = ["job_id", "title", "company", "url", "processed_at", "status"]


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


def ensure_tracker(path: Path = APPLICATIONS_CSV) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        with open(path, "w", newline="", encoding="utf-8") as f:
            _lock(f)
            csv.writer(f).writerow(HEADERS)
            _unlock(f)
        log.info("Created application tracker → %s", path.name)


def record_result(job: JobRecord, status: str, path: Path = APPLICATIONS_CSV) -> None:
    ensure_tracker(path)
    row = {
        "job_id": job.external_id,
        "title": job.title,
        "company": job.company_name,
        "url": job.apply_url,
        "processed_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M"),
        "status": status,
    }
    with open(path, "a", newline="", encoding="utf-8") as f:
        _lock(f)
        csv.DictWriter(f, fieldnames=HEADERS).writerow(row)
        _unlock(f)
    log.debug("Tracked: %s @ %s [%s]", job.title, job.company_name, status)


def get_results(path: Path = APPLICATIONS_CSV) -> list[dict[str, str]]:
    ensure_tracker(path)
    with open(path, "r", encoding="utf-8") as f:
        _lock(f, exclusive=False)
        rows = list(csv.DictReader(f))
        _unlock(f)
    return rows


def get_processed_ids(path: Path = APPLICATIONS_CSV) -> set[str]:
    return {r["job_id"] for r in get_results(path)}
