"""Load runtime settings and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from autoapply.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"

CONFIG_KEY = "jobAppConfig"
QUEUE_KEY = "jobQueue"

# Older settings files stored delays in milliseconds.
_LEGACY_MS_KEYS: dict[str, str] = {
    "poll_interval_ms": "poll_interval",
    "scroll_delay_ms": "scroll_delay",
    "job_throttle_ms": "job_throttle",
    "job_timeout_ms": "job_timeout",
}


@dataclass
class Settings:
    url: str = "https://www.indeed.com/jobs"
    readiness_anchor: str = "#MosaicProviderRichSearchDaemon"
    poll_interval: float = 0.1
    max_poll_attempts: int | None = None
    scroll_step: int = 400
    scroll_delay: float = 0.08
    bottom_tolerance: int = 5
    max_scroll_steps: int | None = None
    job_throttle: float = 2.0
    job_timeout: float = 30.0
    headless: bool = True
    store_path: str = str(DATA_DIR / "store.json")


def _migrate_settings(data: dict[str, Any]) -> dict[str, Any]:
    for old, new in _LEGACY_MS_KEYS.items():
        if old in data and new not in data:
            data[new] = float(data.pop(old)) / 1000.0
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Read settings.yaml (if present) and apply environment overrides."""
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        log.debug("No settings file at %s; using defaults", path)

    data = _migrate_settings(data)
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        log.warning("Ignoring unknown settings: %s", ", ".join(unknown))
    settings = Settings(**{k: v for k, v in data.items() if k in known})

    if get_env("AUTOAPPLY_URL"):
        settings.url = get_env("AUTOAPPLY_URL")
    if get_env("AUTOAPPLY_STORE"):
        settings.store_path = get_env("AUTOAPPLY_STORE")
    if get_env("RUN_HEADLESS"):
        settings.headless = get_env("RUN_HEADLESS").lower() in ("1", "true", "yes")
    return settings


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
