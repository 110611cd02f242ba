"""Resolve a form field to a stored answer.

Rules are tried in priority order and the first that hits wins:

1. custom patterns (user-declared keywords),
2. learned patterns (recorded from earlier answers),
3. profile records (personal, professional, education).

Keyword matching is a case-insensitive substring test against the field
label. Among several matching patterns the one with the most matching
keywords wins; ties go to the earliest pattern.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from autoapply.log import get_logger
from autoapply.models import CHOICE_KINDS, TEXT_KINDS, Configuration, CustomPattern

log = get_logger(__name__)

CUSTOM = "custom-pattern"
LEARNED = "learned-pattern"
PROFILE = "profile"


@dataclass(frozen=True)
class FieldDescriptor:
    label_text: str
    input_kind: str = "text"


@dataclass(frozen=True)
class MatchSource:
    kind: str
    record_id: str
    kind_mismatch: bool = False


@dataclass(frozen=True)
class Match:
    value: str
    input_kind: str
    source: MatchSource


def normalize(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def kinds_compatible(stored: str, actual: str) -> bool:
    """Free-text kinds accept each other, as do choice kinds."""
    for group in (TEXT_KINDS, CHOICE_KINDS):
        if stored in group and actual in group:
            return True
    return stored == actual


def _hits(terms: Iterable[str], label: str) -> int:
    count = 0
    for term in terms:
        term = normalize(term)
        if term and term in label:
            count += 1
    return count


def _terms(pattern: CustomPattern, learned: bool) -> list[str]:
    # learned patterns match on their question; keywords only cover a blank one
    if learned:
        question = normalize(getattr(pattern, "question", ""))
        if question:
            return [question]
    return pattern.keywords


def _best(patterns: Sequence[CustomPattern], label: str, learned: bool = False) -> Optional[CustomPattern]:
    best: Optional[CustomPattern] = None
    best_hits = 0
    for pattern in patterns:
        terms = _terms(pattern, learned)
        hits = _hits(terms, label)
        if hits > best_hits:
            best, best_hits = pattern, hits
    return best


def _match(value: str, stored_kind: str, kind: str, record_id: str, field: FieldDescriptor) -> Match:
    mismatch = not kinds_compatible(stored_kind, field.input_kind)
    if mismatch:
        log.debug(
            "Kind mismatch for %r: stored %s, field %s", field.label_text, stored_kind, field.input_kind,
        )
    return Match(
        value=value,
        input_kind=stored_kind,
        source=MatchSource(kind=kind, record_id=record_id, kind_mismatch=mismatch),
    )


def resolve(field: FieldDescriptor, config: Configuration) -> Optional[Match]:
    """Best stored answer for ``field``, or None when nothing matches."""
    label = normalize(field.label_text)
    if not label:
        return None

    pattern = _best(config.custom_patterns, label)
    if pattern is not None:
        return _match(pattern.value, pattern.input_kind, CUSTOM, pattern.id, field)

    pattern = _best(config.learned_data.patterns, label, learned=True)
    if pattern is not None:
        return _match(pattern.value, pattern.input_kind, LEARNED, pattern.id, field)

    for record in config.profile_records():
        record_label = normalize(record.label)
        if record_label and (record_label in label or label in record_label):
            return _match(record.value, record.input_kind, PROFILE, record.id, field)

    return None
