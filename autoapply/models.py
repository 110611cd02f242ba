"""Data models for scraped jobs and the stored answer configuration.

Attribute names are snake_case; ``to_dict``/``from_dict`` use the camelCase
field names of the persisted document.
"""
from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field, fields
from typing import Any

INPUT_KINDS: tuple[str, ...] = (
    "text", "email", "url", "tel", "number", "textarea", "select", "radio", "checkbox",
)
TEXT_KINDS: frozenset[str] = frozenset({"text", "email", "url", "tel", "number", "textarea"})
CHOICE_KINDS: frozenset[str] = frozenset({"select", "radio", "checkbox"})

SECTIONS: dict[str, str] = {
    "personalInfo": "personal_info",
    "professionalInfo": "professional_info",
    "education": "education",
}


def generate_id() -> str:
    """Millisecond timestamp plus a random suffix, e.g. ``1718000000000-k3j9x0a2b``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


@dataclass(frozen=True)
class JobRecord:
    title: str
    company_name: str
    location: str
    company_description: str
    apply_url: str
    external_id: str
    application_type: str

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "companyName": self.company_name,
            "location": self.location,
            "companyDescription": self.company_description,
            "applyUrl": self.apply_url,
            "externalId": self.external_id,
            "applicationType": self.application_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobRecord:
        return cls(
            title=data["title"],
            company_name=data["companyName"],
            location=data["location"],
            company_description=data["companyDescription"],
            apply_url=data["applyUrl"],
            external_id=data["externalId"],
            application_type=data["applicationType"],
        )


@dataclass
class AnswerRecord:
    id: str
    key: str
    label: str
    value: str
    input_kind: str = "text"

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "key": self.key,
            "label": self.label,
            "value": self.value,
            "inputType": self.input_kind,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnswerRecord:
        return cls(
            id=str(data.get("id") or generate_id()),
            key=data.get("key", ""),
            label=data.get("label", ""),
            value=data.get("value", ""),
            input_kind=data.get("inputType") or "text",
        )


@dataclass
class CustomPattern:
    id: str
    keywords: list[str] = field(default_factory=list)
    value: str = ""
    input_kind: str = "text"
    options: list[str] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "keywords": list(self.keywords),
            "value": self.value,
            "inputType": self.input_kind,
            "options": list(self.options),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomPattern:
        return cls(
            id=str(data.get("id") or generate_id()),
            keywords=list(data.get("keywords") or []),
            value=data.get("value", ""),
            input_kind=data.get("inputType") or "text",
            options=list(data.get("options") or []),
            description=data.get("description") or "",
        )


@dataclass
class LearnedPattern(CustomPattern):
    question: str = ""
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["question"] = self.question
        data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LearnedPattern:
        base = CustomPattern.from_dict(data)
        return cls(
            **{f.name: getattr(base, f.name) for f in fields(CustomPattern)},
            question=data.get("question", ""),
            timestamp=data.get("timestamp", ""),
        )


@dataclass
class LearnedData:
    patterns: list[LearnedPattern] = field(default_factory=list)
    last_updated: str | None = None
    version: str = "1.0"


@dataclass
class Configuration:
    personal_info: list[AnswerRecord] = field(default_factory=list)
    professional_info: list[AnswerRecord] = field(default_factory=list)
    education: list[AnswerRecord] = field(default_factory=list)
    custom_patterns: list[CustomPattern] = field(default_factory=list)
    learned_data: LearnedData = field(default_factory=LearnedData)
    revision: int = 0

    def section(self, name: str) -> list[AnswerRecord]:
        """Return an answer collection by its stored or attribute name."""
        attr = SECTIONS.get(name, name)
        if attr not in SECTIONS.values():
            raise ValueError(f"Unknown section: {name!r}")
        return getattr(self, attr)

    def profile_records(self) -> list[AnswerRecord]:
        """Personal, then professional, then education records."""
        return [*self.personal_info, *self.professional_info, *self.education]

    def to_dict(self) -> dict[str, Any]:
        return {
            "personalInfo": [r.to_dict() for r in self.personal_info],
            "professionalInfo": [r.to_dict() for r in self.professional_info],
            "education": [r.to_dict() for r in self.education],
            "customPatterns": [p.to_dict() for p in self.custom_patterns],
            "learnedData": {
                "patterns": [p.to_dict() for p in self.learned_data.patterns],
                "lastUpdated": self.learned_data.last_updated,
                "version": self.learned_data.version,
            },
            "revision": self.revision,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Configuration:
        """Build from an already-migrated document."""
        learned = data.get("learnedData") or {}
        return cls(
            personal_info=[AnswerRecord.from_dict(r) for r in data.get("personalInfo", [])],
            professional_info=[AnswerRecord.from_dict(r) for r in data.get("professionalInfo", [])],
            education=[AnswerRecord.from_dict(r) for r in data.get("education", [])],
            custom_patterns=[CustomPattern.from_dict(p) for p in data.get("customPatterns", [])],
            learned_data=LearnedData(
                patterns=[LearnedPattern.from_dict(p) for p in learned.get("patterns", [])],
                last_updated=learned.get("lastUpdated"),
                version=learned.get("version") or "1.0",
            ),
            revision=int(data.get("revision") or 0),
        )


@dataclass
class QueueItem:
    job: JobRecord
    status: str = "pending"

    def to_dict(self) -> dict[str, Any]:
        return {**self.job.to_dict(), "status": self.status}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QueueItem:
        return cls(job=JobRecord.from_dict(data), status=data.get("status", "pending"))

