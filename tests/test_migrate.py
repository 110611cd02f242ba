import pytest

from autoapply.migrate import format_label, migrate, migrate_document

LEGACY_SHAPES = [
    {"personalInfo": {"city": "Dallas", "emergencyContact": "Jane"}},
    {
        "personalInfo": [],
        "professionalInfo": {"linkedin": "https://linkedin.com/in/x"},
        "education": {"school": "State", "gpa": 3.5},
    },
    {
        "customPatterns": [{"id": "c1", "keywords": ["visa"], "value": "no", "inputType": "radio"}],
        "textInputPatterns": [{"keywords": ["street"], "value": "1 Main"}],
        "numberInputPatterns": [{"id": "n1", "keywords": ["years"], "value": "5"}],
        "textareaPatterns": [],
    },
    {"personalInfo": [{"id": "p1", "key": "city", "label": "City", "value": "Dallas"}]},
    {"learnedData": {"patterns": [{"id": "l1", "question": "Are you 18?", "answer": "yes"}]}},
    {},
]


def test_object_section_becomes_records():
    doc = migrate({"personalInfo": {"city": "Dallas"}})
    [record] = doc["personalInfo"]
    assert record["key"] == "city"
    assert record["label"] == "City"
    assert record["value"] == "Dallas"
    assert record["inputType"] == "text"
    assert record["id"]


@pytest.mark.parametrize("raw", LEGACY_SHAPES)
def test_migrate_is_idempotent(raw):
    once = migrate(raw)
    assert migrate(once) == once
    assert migrate_document(once)[1] is False


@pytest.mark.parametrize("raw", LEGACY_SHAPES)
def test_sections_are_always_lists(raw):
    doc = migrate(raw)
    for name in ("personalInfo", "professionalInfo", "education", "customPatterns"):
        assert isinstance(doc[name], list)
    assert isinstance(doc["learnedData"]["patterns"], list)


def test_non_string_values_are_dropped():
    doc = migrate({"education": {"school": "State", "gpa": 3.5}})
    assert [r["key"] for r in doc["education"]] == ["school"]


def test_legacy_pattern_collections_merge_into_custom_patterns():
    doc = migrate(LEGACY_SHAPES[2])
    kinds = [(p["keywords"][0], p["inputType"]) for p in doc["customPatterns"]]
    assert kinds == [("visa", "radio"), ("street", "text"), ("years", "number")]
    assert doc["customPatterns"][2]["id"] == "n1"
    assert doc["customPatterns"][1]["id"]
    for key in ("textInputPatterns", "numberInputPatterns", "textareaPatterns"):
        assert key not in doc


def test_learned_data_created_when_absent():
    doc = migrate({})
    assert doc["learnedData"] == {"patterns": [], "lastUpdated": None, "version": "1.0"}


def test_missing_input_type_defaults_to_text():
    doc = migrate(LEGACY_SHAPES[3])
    assert doc["personalInfo"][0]["inputType"] == "text"


def test_legacy_learned_answer_becomes_value_with_keywords():
    [p] = migrate(LEGACY_SHAPES[4])["learnedData"]["patterns"]
    assert p["value"] == "yes"
    assert "answer" not in p
    assert p["keywords"] == ["are you 18?"]
    assert p["inputType"] == "text"


def test_migrate_does_not_touch_its_input():
    raw = {"personalInfo": {"city": "Dallas"}}
    migrate(raw)
    assert raw == {"personalInfo": {"city": "Dallas"}}


def test_current_document_is_unchanged():
    current = migrate(LEGACY_SHAPES[0])
    assert migrate_document(current) == (current, False)


@pytest.mark.parametrize("key,label", [
    ("emergencyContact", "Emergency Contact"),
    ("city", "City"),
    ("referralSource", "Referral Source"),
])
def test_format_label(key, label):
    assert format_label(key) == label


def test_unreadable_legacy_pattern_entries_are_skipped():
    doc = migrate({"textInputPatterns": ["visa", None, {"keywords": ["street"], "value": "123 Main"}]})
    assert [p["keywords"] for p in doc["customPatterns"]] == [["street"]]
    assert doc["customPatterns"][0]["inputType"] == "text"
