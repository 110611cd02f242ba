from autoapply import editor
from autoapply.defaults import default_config
from autoapply.matcher import CUSTOM, LEARNED, PROFILE, FieldDescriptor, resolve
from autoapply.models import Configuration, CustomPattern, LearnedPattern


def _pattern(pid, keywords, value, kind="text"):
    return CustomPattern(id=pid, keywords=keywords, value=value, input_kind=kind)


def test_default_work_authorization_pattern():
    config = default_config()
    match = resolve(FieldDescriptor("Work Authorization (H-1B)?", "radio"), config)
    assert match.value == "no"
    assert match.input_kind == "radio"
    assert match.source.kind == CUSTOM
    assert match.source.kind_mismatch is False


def test_keywords_are_case_insensitive_substrings():
    config = Configuration(custom_patterns=[_pattern("v", ["visa"], "no", "radio")])
    match = resolve(FieldDescriptor("Do you require Visa sponsorship?", "radio"), config)
    assert match.value == "no"


def test_custom_pattern_beats_profile():
    config = default_config()
    match = resolve(FieldDescriptor("Street Address", "text"), config)
    assert match.source.kind == CUSTOM
    assert match.value == "123 Main Street"


def test_most_keyword_hits_wins():
    config = Configuration(custom_patterns=[
        _pattern("one", ["salary"], "negotiable"),
        _pattern("two", ["salary", "expected"], "120000"),
    ])
    match = resolve(FieldDescriptor("Expected salary", "text"), config)
    assert match.source.record_id == "two"


def test_tie_goes_to_earliest_pattern():
    config = Configuration(custom_patterns=[
        _pattern("first", ["salary"], "a"),
        _pattern("second", ["expected"], "b"),
    ])
    assert resolve(FieldDescriptor("Expected salary", "text"), config).source.record_id == "first"


def test_pattern_without_keywords_never_matches():
    config = Configuration(custom_patterns=[_pattern("empty", [], "x"), _pattern("blank", ["  "], "y")])
    assert resolve(FieldDescriptor("Anything at all", "text"), config) is None


def test_learned_beats_profile_but_not_custom():
    config = default_config()
    config.learned_data.patterns.append(LearnedPattern(
        id="l1", keywords=["gpa"], value="3.9", question="GPA", input_kind="number",
    ))
    match = resolve(FieldDescriptor("Cumulative GPA", "number"), config)
    assert (match.source.kind, match.value) == (LEARNED, "3.9")

    config.custom_patterns.append(_pattern("c", ["gpa"], "4.0", "number"))
    assert resolve(FieldDescriptor("Cumulative GPA", "number"), config).value == "4.0"


def test_learned_pattern_without_keywords_uses_question():
    config = Configuration()
    config.learned_data.patterns.append(LearnedPattern(id="l1", value="yes", question="Are you over 18?"))
    match = resolve(FieldDescriptor("Are you over 18? *", "radio"), config)
    assert match.source.kind == LEARNED


def test_profile_lookup_both_directions():
    config = default_config()
    exact = resolve(FieldDescriptor("City", "text"), config)
    assert (exact.source.kind, exact.value) == (PROFILE, "Dallas")
    contains = resolve(FieldDescriptor("What is your GitHub URL?", "url"), config)
    assert contains.value == "https://github.com/johndoe"
    contained = resolve(FieldDescriptor("Previous", "text"), config)
    assert contained.value == "ABC Company"


def test_profile_searches_personal_before_education():
    config = Configuration()
    editor.add_info_item(config, "education", "School Name", "State University")
    editor.add_info_item(config, "personalInfo", "Name", "John Doe")
    assert resolve(FieldDescriptor("Name", "text"), config).value == "John Doe"


def test_kind_mismatch_is_flagged_but_value_returned():
    config = Configuration(custom_patterns=[_pattern("c", ["relocate"], "yes", "radio")])
    match = resolve(FieldDescriptor("Willing to relocate? Explain", "textarea"), config)
    assert match.value == "yes"
    assert match.source.kind_mismatch is True

    config = Configuration(custom_patterns=[_pattern("c", ["email"], "a@b.c", "email")])
    assert resolve(FieldDescriptor("Email", "text"), config).source.kind_mismatch is False


def test_no_match_and_blank_label():
    config = default_config()
    assert resolve(FieldDescriptor("Favourite colour", "text"), config) is None
    assert resolve(FieldDescriptor("   ", "text"), config) is None


def test_same_input_same_answer():
    config = default_config()
    field = FieldDescriptor("Phone Number", "tel")
    assert resolve(field, config) == resolve(field, config)


def test_learned_pattern_matches_on_question_not_stale_keywords():
    config = Configuration()
    config.learned_data.patterns.append(LearnedPattern(
        id="l1", keywords=["are you 18?"], value="yes", question="Notice period", input_kind="text",
    ))
    assert resolve(FieldDescriptor("Are you 18?", "radio"), config) is None
    assert resolve(FieldDescriptor("Notice period (weeks)", "text"), config).source.record_id == "l1"
