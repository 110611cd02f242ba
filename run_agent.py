#!/usr/bin/env python3
"""Entry point to run the Indeed automation agent."""
from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parent))

from autoapply.config import ensure_dirs, get_env, load_settings
from autoapply.log import get_logger
from autoapply.matcher import FieldDescriptor

log = get_logger(__name__)


def _ask(field: FieldDescriptor) -> Optional[str]:
    """Prompt on the terminal for a question no stored answer covers."""
    val = input(f"  {field.label_text} ({field.input_kind}) [skip]: ").strip()
    return val or None


async def _main() -> dict:
    from autoapply.agent import Agent

    interactive = get_env("RUN_INTERACTIVE").lower() in ("1", "true", "yes")
    agent = Agent(load_settings(), answer_provider=_ask if interactive else None)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, agent.stop)
        except NotImplementedError:
            pass
    return await agent.run()


if __name__ == "__main__":
    ensure_dirs()
    result = asyncio.run(_main())
    log.info("Run %s.", result["status"])
    log.info("  Jobs found: %d", result["jobs_found"])
    log.info("  Queued: %d", result["queued"])
    log.info("  Processed: %d", result["processed"])
    log.info("  Failed: %d", result["failed"])
