"""Record answers given for questions no stored rule covered."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from autoapply.log import get_logger
from autoapply.matcher import normalize
from autoapply.models import Configuration, LearnedPattern, generate_id

log = get_logger(__name__)


def record(
    question: str,
    answer: str,
    input_kind: str,
    config: Configuration,
    options: Optional[list[str]] = None,
) -> Configuration:
    """Append a learned pattern for ``question`` and return the config.

    Repeated calls with the same question append separate entries; use
    ``find_learned`` first to skip questions that are already known.
    """
    now = datetime.now(timezone.utc).isoformat()
    keyword = normalize(question)
    pattern = LearnedPattern(
        id=generate_id(),
        keywords=[keyword] if keyword else [],
        value=answer,
        input_kind=input_kind,
        options=list(options or []),
        question=question,
        timestamp=now,
    )
    config.learned_data.patterns.append(pattern)
    config.learned_data.last_updated = now
    log.info("Learned answer for %r (%s)", question, input_kind)
    return config


def find_learned(question: str, config: Configuration) -> Optional[LearnedPattern]:
    """Existing learned pattern whose question equals ``question`` (normalized)."""
    wanted = normalize(question)
    for pattern in config.learned_data.patterns:
        if normalize(pattern.question) == wanted:
            return pattern
    return None
