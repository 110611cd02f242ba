"""Upgrade stored configuration documents to the current shape.

Each step is a pure function taking a raw document and returning either a
new document (the step applied) or ``None`` (the shape it recognizes is not
present). Steps run in order and every one is idempotent, so
``migrate(migrate(doc)) == migrate(doc)``.
"""
from __future__ import annotations

import copy
import re
from typing import Any, Callable, Optional

from autoapply.log import get_logger
from autoapply.models import SECTIONS, generate_id

log = get_logger(__name__)

Doc = dict[str, Any]
Step = Callable[[Doc], Optional[Doc]]

LEGACY_PATTERN_KEYS: dict[str, str] = {
    "textInputPatterns": "text",
    "numberInputPatterns": "number",
    "textareaPatterns": "textarea",
}


def format_label(key: str) -> str:
    """``emergencyContact`` -> ``Emergency Contact``."""
    spaced = re.sub(r"([A-Z])", r" \1", key)
    return (spaced[:1].upper() + spaced[1:]).strip()


def sections_to_lists(doc: Doc) -> Optional[Doc]:
    """Key→string maps in the answer sections become AnswerRecord lists."""
    legacy = [name for name in SECTIONS if isinstance(doc.get(name), dict)]
    if not legacy:
        return None
    out = dict(doc)
    for name in legacy:
        out[name] = [
            {
                "id": generate_id(),
                "key": key,
                "label": format_label(key),
                "value": value,
                "inputType": "text",
            }
            for key, value in doc[name].items()
            if isinstance(value, str)
        ]
        log.info("Migrated %s to list format (%d items)", name, len(out[name]))
    return out


def ensure_lists(doc: Doc) -> Optional[Doc]:
    """Missing or null sections become empty lists."""
    missing = [
        name for name in (*SECTIONS, "customPatterns")
        if not isinstance(doc.get(name), list)
    ]
    if not missing:
        return None
    out = dict(doc)
    for name in missing:
        if doc.get(name) is not None:
            log.warning("Discarding unreadable %s (%s)", name, type(doc[name]).__name__)
        out[name] = []
    return out


def merge_legacy_patterns(doc: Doc) -> Optional[Doc]:
    """Per-kind pattern collections fold into ``customPatterns``."""
    present = [key for key in LEGACY_PATTERN_KEYS if key in doc]
    if not present:
        return None
    out = dict(doc)
    merged = list(out.get("customPatterns") or [])
    for key in present:
        kind = LEGACY_PATTERN_KEYS[key]
        for pattern in doc.get(key) or []:
            if not isinstance(pattern, dict):
                log.warning("Skipping unreadable %s entry (%s)", key, type(pattern).__name__)
                continue
            merged.append({**pattern, "inputType": kind, "id": pattern.get("id") or generate_id()})
        del out[key]
        log.info("Migrated %s into customPatterns", key)
    out["customPatterns"] = merged
    return out


def ensure_learned_data(doc: Doc) -> Optional[Doc]:
    if isinstance(doc.get("learnedData"), dict):
        return None
    return {**doc, "learnedData": {"patterns": [], "lastUpdated": None, "version": "1.0"}}


def normalize_learned_patterns(doc: Doc) -> Optional[Doc]:
    """Legacy learned entries stored ``answer`` and had no keywords."""
    learned = doc.get("learnedData") or {}
    patterns = learned.get("patterns")
    if not isinstance(patterns, list):
        return {**doc, "learnedData": {**learned, "patterns": []}}

    def stale(p: Doc) -> bool:
        return ("answer" in p and "value" not in p) or (not p.get("keywords") and (p.get("question") or "").strip())

    if not any(stale(p) for p in patterns):
        return None
    upgraded = []
    for p in patterns:
        p = dict(p)
        if "answer" in p and "value" not in p:
            p["value"] = p.pop("answer")
        if not p.get("keywords") and (p.get("question") or "").strip():
            p["keywords"] = [p["question"].strip().lower()]
        upgraded.append(p)
    return {**doc, "learnedData": {**learned, "patterns": upgraded}}


def default_input_types(doc: Doc) -> Optional[Doc]:
    """List items without ``inputType`` default to ``text``."""

    def needs(items: list) -> bool:
        return any(isinstance(i, dict) and not i.get("inputType") for i in items)

    targets = [name for name in (*SECTIONS, "customPatterns") if needs(doc.get(name) or [])]
    learned = doc.get("learnedData") or {}
    learned_needs = needs(learned.get("patterns") or [])
    if not targets and not learned_needs:
        return None

    def fill(items: list) -> list:
        return [{**i, "inputType": i.get("inputType") or "text"} for i in items]

    out = dict(doc)
    for name in targets:
        out[name] = fill(doc[name])
    if learned_needs:
        out["learnedData"] = {**learned, "patterns": fill(learned["patterns"])}
    return out


STEPS: list[Step] = [
    sections_to_lists,
    merge_legacy_patterns,
    ensure_lists,
    ensure_learned_data,
    normalize_learned_patterns,
    default_input_types,
]


def migrate_document(raw: Doc) -> tuple[Doc, bool]:
    """Run every step; return the upgraded document and whether it changed."""
    doc = copy.deepcopy(raw)
    changed = False
    for step in STEPS:
        result = step(doc)
        if result is not None:
            doc = result
            changed = True
    return doc, changed


def migrate(raw: Doc) -> Doc:
    return migrate_document(raw)[0]
