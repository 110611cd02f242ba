"""Edit operations on a Configuration.

Every function mutates the configuration in place and returns it; callers
persist the result through ``ConfigStore.save``.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, TypeVar

from autoapply.defaults import default_config
from autoapply.errors import RecordNotFound
from autoapply.log import get_logger
from autoapply.matcher import normalize
from autoapply.models import (
    CHOICE_KINDS,
    INPUT_KINDS,
    AnswerRecord,
    Configuration,
    CustomPattern,
    generate_id,
)

log = get_logger(__name__)

T = TypeVar("T", AnswerRecord, CustomPattern)


def derive_key(label: str) -> str:
    """``Phone Number`` -> ``phonenumber``."""
    return re.sub(r"\s+", "", label.lower())


def split_terms(raw: str | Iterable[str]) -> list[str]:
    """Comma-separated text or a list → stripped, non-empty tokens."""
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [t.strip() for t in items if t and t.strip()]


def _check_kind(kind: str) -> None:
    if kind not in INPUT_KINDS:
        raise ValueError(f"Unknown input kind: {kind!r}")


def _find(items: list[T], record_id: str) -> T:
    for item in items:
        if item.id == record_id:
            return item
    raise RecordNotFound(record_id)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# -- answer records -----------------------------------------------------------

def add_info_item(
    config: Configuration, section: str, label: str, value: str = "", input_kind: str = "text",
) -> AnswerRecord:
    _check_kind(input_kind)
    record = AnswerRecord(
        id=generate_id(), key=derive_key(label), label=label, value=value, input_kind=input_kind,
    )
    config.section(section).append(record)
    return record


def save_info_item(
    config: Configuration, section: str, record_id: str, label: str, value: str, input_kind: str,
) -> Configuration:
    _check_kind(input_kind)
    record = _find(config.section(section), record_id)
    record.label = label
    record.value = value
    record.input_kind = input_kind
    record.key = derive_key(label)
    return config


def delete_info_item(config: Configuration, section: str, record_id: str) -> Configuration:
    items = config.section(section)
    items[:] = [r for r in items if r.id != record_id]
    return config


# -- custom patterns ----------------------------------------------------------

def add_pattern(config: Configuration) -> CustomPattern:
    """Append an empty pattern; it stays ineligible until keywords are saved."""
    pattern = CustomPattern(id=generate_id())
    config.custom_patterns.append(pattern)
    return pattern


def save_pattern(
    config: Configuration,
    pattern_id: str,
    keywords: str | Iterable[str],
    value: str,
    input_kind: str = "text",
    options: str | Iterable[str] = (),
    description: str | None = None,
) -> Configuration:
    _check_kind(input_kind)
    opts = split_terms(options)
    if input_kind in CHOICE_KINDS and not opts:
        raise ValueError(f"{input_kind} patterns need at least one option")
    pattern = _find(config.custom_patterns, pattern_id)
    pattern.keywords = [k.lower() for k in split_terms(keywords)]
    pattern.value = value
    pattern.input_kind = input_kind
    pattern.options = opts
    if description is not None:
        pattern.description = description
    if not pattern.keywords:
        log.warning("Pattern %s saved without keywords; it will never match", pattern_id)
    return config


def delete_pattern(config: Configuration, pattern_id: str) -> Configuration:
    config.custom_patterns = [p for p in config.custom_patterns if p.id != pattern_id]
    return config


# -- learned data -------------------------------------------------------------

def save_learned(
    config: Configuration, pattern_id: str, question: str, value: str, input_kind: str,
) -> Configuration:
    _check_kind(input_kind)
    pattern = _find(config.learned_data.patterns, pattern_id)
    if question != pattern.question:
        keyword = normalize(question)
        pattern.keywords = [keyword] if keyword else []
    pattern.question = question
    pattern.value = value
    pattern.input_kind = input_kind
    return config


def delete_learned(config: Configuration, pattern_id: str) -> Configuration:
    learned = config.learned_data
    learned.patterns = [p for p in learned.patterns if p.id != pattern_id]
    return config


def clear_learned(config: Configuration) -> Configuration:
    config.learned_data.patterns = []
    config.learned_data.last_updated = _now()
    return config


def reset_to_defaults(config: Configuration) -> Configuration:
    """Default configuration that keeps learned data and the stored revision."""
    fresh = default_config()
    fresh.learned_data = config.learned_data
    fresh.revision = config.revision
    return fresh
