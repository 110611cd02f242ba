"""Decide what to type into each field of an application form."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from autoapply import learning
from autoapply.log import get_logger
from autoapply.matcher import FieldDescriptor, resolve
from autoapply.models import Configuration

log = get_logger(__name__)

AnswerProvider = Callable[[FieldDescriptor], Optional[str]]

PROVIDED = "provided"
UNMATCHED = "unmatched"


@dataclass(frozen=True)
class FillDecision:
    field: FieldDescriptor
    value: Optional[str]
    input_kind: str
    source: str
    kind_mismatch: bool = False

    @property
    def fillable(self) -> bool:
        return self.value is not None


def autofill(
    fields: Sequence[FieldDescriptor],
    config: Configuration,
    answer_provider: Optional[AnswerProvider] = None,
    *,
    dedupe: bool = True,
) -> tuple[list[FillDecision], int]:
    """Resolve every field; record provided answers as learned patterns.

    Returns the decisions in field order and the number of new learned
    patterns appended to ``config``.
    """
    decisions: list[FillDecision] = []
    learned = 0
    for field in fields:
        match = resolve(field, config)
        if match is not None:
            decisions.append(FillDecision(
                field=field,
                value=match.value,
                input_kind=match.input_kind,
                source=match.source.kind,
                kind_mismatch=match.source.kind_mismatch,
            ))
            continue

        answer = answer_provider(field) if answer_provider else None
        if not answer:
            log.info("No answer for %r", field.label_text)
            decisions.append(FillDecision(field, None, field.input_kind, UNMATCHED))
            continue

        decisions.append(FillDecision(field, answer, field.input_kind, PROVIDED))
        if dedupe and learning.find_learned(field.label_text, config) is not None:
            log.debug("Already learned %r; not recording again", field.label_text)
            continue
        learning.record(field.label_text, answer, field.input_kind, config)
        learned += 1
    return decisions, learned
