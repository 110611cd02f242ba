"""Process-wide logging setup (stdlib only).

Console output goes to stdout at ``LOG_LEVEL``; a dated DEBUG file under
``logs/`` (or ``AUTOAPPLY_LOG_DIR``) records dropped cards and fill details.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_NOISY = ("asyncio", "urllib3")
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; the root handlers are installed on first use."""
    global _configured
    if not _configured:
        _install_handlers()
        _configured = True
    return logging.getLogger(name)


def _file_handler() -> logging.Handler | None:
    if os.environ.get("AUTOAPPLY_NO_LOG_FILE"):
        return None
    log_dir = Path(os.environ.get("AUTOAPPLY_LOG_DIR") or _DEFAULT_LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            log_dir / f"autoapply_{datetime.now():%Y-%m-%d}.log", encoding="utf-8"
        )
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    return handler


def _install_handlers() -> None:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]
    file_handler = _file_handler()
    if file_handler is not None:
        handlers.append(file_handler)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(level)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)
