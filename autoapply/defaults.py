"""Built-in seed configuration written on first run."""
from __future__ import annotations

from autoapply.models import (
    AnswerRecord,
    Configuration,
    CustomPattern,
    LearnedData,
    generate_id,
)

_PERSONAL: list[tuple[str, str, str, str]] = [
    ("address", "Street Address", "123 Main Street", "text"),
    ("city", "City", "Dallas", "text"),
    ("state", "State", "TX", "text"),
    ("zip", "ZIP Code", "75201", "text"),
    ("phone", "Phone Number", "(555) 123-4567", "tel"),
    ("email", "Email Address", "john.doe.jobs@gmail.com", "email"),
    ("emergencyContact", "Emergency Contact", "Jane Doe - (555) 987-6543", "text"),
]

_PROFESSIONAL: list[tuple[str, str, str, str]] = [
    ("linkedin", "LinkedIn URL", "https://www.linkedin.com/in/johndoe", "url"),
    ("website", "Portfolio Website", "https://johndoe-portfolio.com", "url"),
    ("github", "GitHub URL", "https://github.com/johndoe", "url"),
    ("referralSource", "Referral Source", "Online job search", "text"),
    ("salary", "Salary Expectation", "Competitive/Negotiable", "text"),
    ("previousEmployer", "Previous Employer", "ABC Company", "text"),
    ("supervisor", "Previous Supervisor", "John Smith", "text"),
    ("experience", "Years of Experience", "3-5 years", "text"),
    ("availability", "Availability", "Immediately", "text"),
    ("motivation", "Motivation/Why Applying",
     "Interested in this opportunity and believe my skills align well with the role requirements.",
     "textarea"),
]

_EDUCATION: list[tuple[str, str, str, str]] = [
    ("school", "School/University", "State University", "text"),
    ("major", "Major/Field of Study", "Business Administration", "text"),
    ("gpa", "GPA", "3.5", "number"),
]


def _records(rows: list[tuple[str, str, str, str]]) -> list[AnswerRecord]:
    return [
        AnswerRecord(id=generate_id(), key=key, label=label, value=value, input_kind=kind)
        for key, label, value, kind in rows
    ]


def default_config() -> Configuration:
    """A fresh default configuration with newly generated ids."""
    return Configuration(
        personal_info=_records(_PERSONAL),
        professional_info=_records(_PROFESSIONAL),
        education=_records(_EDUCATION),
        custom_patterns=[
            CustomPattern(
                id=generate_id(),
                keywords=["address", "street"],
                value="123 Main Street",
                input_kind="text",
                description="Street address pattern",
            ),
            CustomPattern(
                id=generate_id(),
                keywords=["visa", "sponsorship", "h-1b", "work authorization"],
                value="no",
                input_kind="radio",
                options=["yes", "no"],
                description="Work authorization question",
            ),
        ],
        learned_data=LearnedData(),
    )
